"""
Inspect or edit the Trakt "Following" list from the command line.

    python -m followsync.scripts.followed_list list
    python -m followsync.scripts.followed_list add --trakt-id 1390
"""
import argparse
import asyncio
import sys

from followsync.schemas import ShowRef
from followsync.services.followed_shows import FollowedShowsDataSource
from followsync.services.trakt_client import TraktAPIError, TraktClient
from followsync.utils.logger import logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage the Trakt 'Following' list")
    parser.add_argument("command", choices=["resolve", "list", "add", "remove"])
    parser.add_argument("--trakt-id", type=int, default=None)
    parser.add_argument("--tmdb-id", type=int, default=None)
    parser.add_argument("--imdb-id", default=None)
    return parser


async def run(args: argparse.Namespace, source: FollowedShowsDataSource) -> int:
    followed = await source.resolve_followed_list()
    logger.info(f"Following list: {followed.name} (id={followed.id})")

    if args.command == "list":
        pairs = await source.list_shows_in_list(followed.id)
        for entry, show in pairs:
            logger.info(f"{show.title} [trakt={show.trakt_id}] followed at {entry.followed_at}")
        logger.info(f"{len(pairs)} show(s) followed")
    elif args.command in ("add", "remove"):
        if args.trakt_id is None and args.tmdb_id is None and args.imdb_id is None:
            logger.error("Give at least one of --trakt-id, --tmdb-id, --imdb-id")
            return 2
        ref = ShowRef(trakt_id=args.trakt_id, tmdb_id=args.tmdb_id, imdb_id=args.imdb_id)
        if args.command == "add":
            await source.add_shows_to_list(followed.id, [ref])
        else:
            await source.remove_shows_from_list(followed.id, [ref])
        logger.info(f"{args.command} done for {ref}")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    source = FollowedShowsDataSource(users_service=TraktClient)
    try:
        return asyncio.run(run(args, source))
    except TraktAPIError as e:
        logger.error(f"Trakt request failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
