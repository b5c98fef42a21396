class TraktAPIError(Exception):
    """Base exception for Trakt API errors."""
    transient = False

    def __init__(self, message: str, status_code: "Optional[int]" = None):
        super().__init__(message)
        self.status_code = status_code

class TraktAuthError(TraktAPIError):
    """Raised when Trakt authentication fails or token is missing/expired."""
    pass

class TraktClientError(TraktAPIError):
    """Raised when Trakt rejects a request (4xx other than auth and rate limiting)."""
    pass

class TraktNetworkError(TraktAPIError):
    """Raised when network or connection to Trakt fails."""
    transient = True

class TraktUnavailableError(TraktAPIError):
    """Raised when Trakt API is offline, overloaded or rate limiting us."""
    transient = True

    def __init__(self, message: str, status_code: "Optional[int]" = None, retry_after: "Optional[float]" = None):
        super().__init__(message, status_code)
        self.retry_after = retry_after

"""
trakt_client.py

Async Trakt API client for the user-list endpoints (lists, list items).
Every HTTP failure is translated into the TraktAPIError hierarchy above; the
`transient` flag tells the retry policy whether another attempt can help.
"""

import logging
import httpx
from typing import Any, Dict, List, Optional

from followsync.core.config import settings
from followsync.schemas import ListPrivacy, SyncResponse, TraktList, TraktListEntry
from pydantic import ValidationError

logger = logging.getLogger(__name__)

USER_ME = "me"


def _retry_after(resp: httpx.Response) -> Optional[float]:
    value = resp.headers.get("Retry-After")
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None


def body_or_raise(resp: httpx.Response) -> Any:
    """Unwrap a Trakt response body, raising the matching TraktAPIError on failure."""
    status = resp.status_code
    if resp.is_success:
        # Some Trakt endpoints return 204 No Content.
        if status == 204 or not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            raise TraktAPIError(f"Malformed Trakt response body: {e}", status) from e

    if status in (401, 403):
        logger.error(f"Trakt rejected credentials (status {status}).")
        raise TraktAuthError("Trakt account is not authorized. Please reauthorize your Trakt account.", status)
    if status == 429:
        logger.warning("Trakt API rate limit exceeded.")
        raise TraktUnavailableError("Trakt API rate limit exceeded. Please wait and try again.", status, _retry_after(resp))
    if status >= 500:
        logger.warning(f"Trakt API is currently unavailable (status {status}).")
        raise TraktUnavailableError("Trakt API is currently offline or unavailable. Please try again later.", status, _retry_after(resp))
    if 400 <= status < 500:
        logger.error(f"Trakt API rejected request with HTTP {status}: {resp.text[:200]}")
        raise TraktClientError(f"Trakt API error: HTTP {status}", status)
    raise TraktAPIError(f"Unexpected Trakt API status: HTTP {status}", status)


def _sync_response(result: Any) -> SyncResponse:
    try:
        return SyncResponse.model_validate(result or {})
    except ValidationError as e:
        raise TraktAPIError(f"Unexpected Trakt sync payload: {e}") from e


class TraktClient:
    def __init__(self, client_id: Optional[str] = None, access_token: Optional[str] = None,
                 base_url: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self._client_id = client_id if client_id is not None else settings.trakt_client_id
        self._access_token = access_token if access_token is not None else settings.trakt_access_token
        self.base_url = (base_url or settings.trakt_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.trakt_timeout_seconds
        # Optional transport lets callers (and tests) swap the network layer.
        self._transport = transport

    def _get_headers(self) -> Dict[str, str]:
        if not self._client_id:
            logger.error("Trakt client_id is missing (TRAKT_CLIENT_ID not configured)")
            raise TraktAuthError("Trakt integration is not configured. Please set TRAKT_CLIENT_ID.")
        if not self._access_token:
            logger.error("Trakt access_token is missing (TRAKT_ACCESS_TOKEN not configured)")
            raise TraktAuthError("Trakt account is not authorized. Please reauthorize your Trakt account.")
        return {
            "Content-Type": "application/json",
            "trakt-api-version": "2",
            "trakt-api-key": self._client_id,
            "Authorization": f"Bearer {self._access_token}",
        }

    async def _request(self, method: str, endpoint: str, params: Optional[dict] = None, data: Optional[dict] = None) -> Any:
        url = f"{self.base_url}{endpoint}"
        headers = self._get_headers()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.request(method, url, headers=headers, params=params, json=data)
        except httpx.TimeoutException as e:
            logger.warning(f"Network timeout calling Trakt {method} {endpoint}.")
            raise TraktNetworkError("Network timeout connecting to Trakt API. Please try again later.") from e
        except httpx.TransportError as e:
            logger.warning(f"Network error calling Trakt {method} {endpoint}: {e}")
            raise TraktNetworkError("Network error connecting to Trakt API. Please check your connection or try again later.") from e
        return body_or_raise(resp)

    async def lists(self, user: str = USER_ME) -> List[TraktList]:
        """Return all custom lists owned by `user`, in the order Trakt returns them."""
        data = await self._request("GET", f"/users/{user}/lists")
        try:
            return [TraktList.model_validate(item) for item in (data or [])]
        except ValidationError as e:
            raise TraktAPIError(f"Unexpected Trakt lists payload: {e}") from e

    async def create_list(self, user: str, name: str, privacy: ListPrivacy = ListPrivacy.PRIVATE) -> TraktList:
        """Create a new list on Trakt.

        Args:
            user: User slug, normally "me"
            name: List name
            privacy: List privacy setting

        Returns:
            The created list, including `ids.trakt`
        """
        data = {"name": name, "privacy": ListPrivacy(privacy).value}
        result = await self._request("POST", f"/users/{user}/lists", data=data)
        try:
            return TraktList.model_validate(result)
        except ValidationError as e:
            raise TraktAPIError(f"Unexpected Trakt list payload: {e}") from e

    async def list_items(self, user: str, list_id: int, extended: Optional[str] = None) -> List[TraktListEntry]:
        """Get the show entries of a list, optionally with an `extended` projection."""
        params = {"extended": extended} if extended else None
        data = await self._request("GET", f"/users/{user}/lists/{list_id}/items/shows", params=params)
        try:
            return [TraktListEntry.model_validate(item) for item in (data or [])]
        except ValidationError as e:
            raise TraktAPIError(f"Unexpected Trakt list items payload: {e}") from e

    async def add_list_items(self, user: str, list_id: int, payload: Dict[str, Any]) -> SyncResponse:
        """Add items (SyncItems body) to a list."""
        result = await self._request("POST", f"/users/{user}/lists/{list_id}/items", data=payload)
        return _sync_response(result)

    async def delete_list_items(self, user: str, list_id: int, payload: Dict[str, Any]) -> SyncResponse:
        """Remove items (SyncItems body) from a list."""
        result = await self._request("POST", f"/users/{user}/lists/{list_id}/items/remove", data=payload)
        return _sync_response(result)
