"""
followed_shows.py

Trakt-backed data source for the user's followed shows.

All followed shows live in a single private Trakt list named "Following".
The list is looked up by name and created on first use; every operation
goes straight to Trakt (nothing is cached here) and is wrapped in the
retry policy.

Known gap: the lookup-then-create in resolve_followed_list() is only
serialized inside one data source instance. Two processes resolving at the
same time can both miss the list and create two lists named "Following".
"""
import asyncio
from typing import Callable, List, Optional, Sequence, Tuple

from followsync.schemas import FollowedShowEntry, ListPrivacy, Show, ShowRef, TraktList, TraktListEntry, sync_items_payload
from followsync.services.mappers import map_entry_to_followed_entry, map_entry_to_show, pair_mapper
from followsync.services.retry import RetryPolicy, with_backoff
from followsync.services.trakt_client import USER_ME, TraktClient

LIST_NAME = "Following"


class FollowedShowsDataSource:
    def __init__(self, users_service: Callable[[], TraktClient],
                 entry_to_show: Callable[[TraktListEntry], Show] = map_entry_to_show,
                 entry_to_followed_entry: Callable[[TraktListEntry], FollowedShowEntry] = map_entry_to_followed_entry,
                 retry_policy: Optional[RetryPolicy] = None):
        self._users_factory = users_service
        self._users: Optional[TraktClient] = None
        self._list_shows_mapper = pair_mapper(entry_to_followed_entry, entry_to_show)
        self._retry = retry_policy or RetryPolicy.from_settings()
        self._resolve_lock = asyncio.Lock()

    @property
    def users(self) -> TraktClient:
        """Trakt client, built from the factory on first use."""
        if self._users is None:
            self._users = self._users_factory()
        return self._users

    async def resolve_followed_list(self) -> TraktList:
        async with self._resolve_lock:
            existing = await with_backoff(self._find_followed_list, policy=self._retry, operation="trakt_lists")
            if existing is not None:
                return existing

            return await with_backoff(
                self.users.create_list, USER_ME, LIST_NAME, ListPrivacy.PRIVATE,
                policy=self._retry, operation="trakt_create_list",
            )

    async def _find_followed_list(self) -> Optional[TraktList]:
        lists = await self.users.lists(USER_ME)
        return next((trakt_list for trakt_list in lists if trakt_list.name == LIST_NAME), None)

    async def add_shows_to_list(self, list_id: int, shows: Sequence[ShowRef]) -> None:
        payload = sync_items_payload(shows)
        await with_backoff(
            self.users.add_list_items, USER_ME, list_id, payload,
            policy=self._retry, operation="trakt_add_list_items",
        )

    async def remove_shows_from_list(self, list_id: int, shows: Sequence[ShowRef]) -> None:
        payload = sync_items_payload(shows)
        await with_backoff(
            self.users.delete_list_items, USER_ME, list_id, payload,
            policy=self._retry, operation="trakt_delete_list_items",
        )

    async def list_shows_in_list(self, list_id: int) -> List[Tuple[FollowedShowEntry, Show]]:
        entries = await with_backoff(
            self.users.list_items, USER_ME, list_id, "noseasons",
            policy=self._retry, operation="trakt_list_items",
        )
        return self._list_shows_mapper(entries)
