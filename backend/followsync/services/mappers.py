"""
mappers.py

Pure functions turning Trakt list entries into domain models.
"""
from typing import Callable, List, Sequence, Tuple, TypeVar

from followsync.schemas import FollowedShowEntry, Show, TraktListEntry

F = TypeVar("F")
T1 = TypeVar("T1")
T2 = TypeVar("T2")


def map_entry_to_show(entry: TraktListEntry) -> Show:
    show = entry.show
    if show is None:
        raise ValueError(f"Trakt list entry {entry.id} has no show")
    airs = show.airs
    return Show(
        trakt_id=show.ids.trakt,
        imdb_id=show.ids.imdb,
        tmdb_id=show.ids.tmdb,
        tvdb_id=show.ids.tvdb,
        title=show.title,
        original_title=show.title,
        overview=show.overview,
        homepage=show.homepage,
        trakt_rating=show.rating,
        trakt_votes=show.votes,
        certification=show.certification,
        first_aired=show.first_aired,
        country=show.country,
        network=show.network,
        runtime=show.runtime,
        genres=list(show.genres or []),
        status=show.status,
        airs_day=airs.day if airs else None,
        airs_time=airs.time if airs else None,
        airs_tz=airs.timezone if airs else None,
    )


def map_entry_to_followed_entry(entry: TraktListEntry) -> FollowedShowEntry:
    # show_id is assigned by whoever persists the entry
    return FollowedShowEntry(followed_at=entry.listed_at, trakt_id=entry.id)


def pair_mapper(first: Callable[[F], T1], second: Callable[[F], T2]) -> Callable[[Sequence[F]], List[Tuple[T1, T2]]]:
    """Apply two mappers to every item, keeping item order."""
    def mapper(items: Sequence[F]) -> List[Tuple[T1, T2]]:
        return [(first(item), second(item)) for item in items]
    return mapper
