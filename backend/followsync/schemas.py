"""
schemas.py

Pydantic schemas for Trakt list payloads and the followed-show domain models.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any
from enum import Enum
import datetime


# Trakt wire shapes

class ListPrivacy(str, Enum):
    PRIVATE = "private"
    LINK = "link"
    FRIENDS = "friends"
    PUBLIC = "public"

class ListIds(BaseModel):
    trakt: Optional[int] = None
    slug: Optional[str] = None

class TraktList(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ids: ListIds = Field(default_factory=ListIds)
    name: str
    description: Optional[str] = None
    privacy: Optional[ListPrivacy] = None
    display_numbers: Optional[bool] = None
    allow_comments: Optional[bool] = None
    sort_by: Optional[str] = None
    sort_how: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None
    item_count: Optional[int] = None
    comment_count: Optional[int] = None
    likes: Optional[int] = None

    @property
    def id(self) -> Optional[int]:
        return self.ids.trakt

class ShowIds(BaseModel):
    trakt: Optional[int] = None
    slug: Optional[str] = None
    tvdb: Optional[int] = None
    imdb: Optional[str] = None
    tmdb: Optional[int] = None

class Airs(BaseModel):
    day: Optional[str] = None
    time: Optional[str] = None
    timezone: Optional[str] = None

class TraktShow(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    year: Optional[int] = None
    ids: ShowIds = Field(default_factory=ShowIds)
    overview: Optional[str] = None
    first_aired: Optional[datetime.datetime] = None
    airs: Optional[Airs] = None
    runtime: Optional[int] = None
    certification: Optional[str] = None
    network: Optional[str] = None
    country: Optional[str] = None
    homepage: Optional[str] = None
    status: Optional[str] = None
    rating: Optional[float] = None
    votes: Optional[int] = None
    genres: Optional[List[str]] = None
    aired_episodes: Optional[int] = None

class TraktListEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    rank: Optional[int] = None
    id: Optional[int] = None
    listed_at: Optional[datetime.datetime] = None
    type: Optional[str] = None
    show: Optional[TraktShow] = None

class SyncResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    added: Dict[str, int] = Field(default_factory=dict)
    existing: Dict[str, int] = Field(default_factory=dict)
    deleted: Dict[str, int] = Field(default_factory=dict)
    not_found: Dict[str, Any] = Field(default_factory=dict)


# Domain models

class ShowRef(BaseModel):
    """Identifiers for a show across Trakt, IMDb and TMDb."""
    model_config = ConfigDict(frozen=True)

    trakt_id: Optional[int] = None
    imdb_id: Optional[str] = None
    tmdb_id: Optional[int] = None

class Show(ShowRef):
    title: Optional[str] = None
    original_title: Optional[str] = None
    tvdb_id: Optional[int] = None
    overview: Optional[str] = None
    homepage: Optional[str] = None
    trakt_rating: Optional[float] = None
    trakt_votes: Optional[int] = None
    certification: Optional[str] = None
    first_aired: Optional[datetime.datetime] = None
    country: Optional[str] = None
    network: Optional[str] = None
    runtime: Optional[int] = None
    genres: List[str] = Field(default_factory=list)
    status: Optional[str] = None
    airs_day: Optional[str] = None
    airs_time: Optional[str] = None
    airs_tz: Optional[str] = None

class PendingAction(str, Enum):
    NOTHING = "nothing"
    UPLOAD = "upload"
    DELETE = "delete"

class FollowedShowEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    show_id: Optional[int] = None
    followed_at: Optional[datetime.datetime] = None
    pending_action: PendingAction = PendingAction.NOTHING
    trakt_id: Optional[int] = None


def sync_items_payload(shows) -> Dict[str, Any]:
    """Build a Trakt SyncItems body for shows, copying ids verbatim (None stays null)."""
    return {
        "shows": [
            {"ids": {"trakt": show.trakt_id, "imdb": show.imdb_id, "tmdb": show.tmdb_id}}
            for show in shows
        ]
    }
