"""
Domain models - the core of business logic.
These models are transport-agnostic: the same shapes travel to the backend,
into local storage and out through the web adapter.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List, Any
from datetime import date, datetime, timezone
from enum import Enum


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _unique(ids: List[str]) -> List[str]:
    """Drop duplicates, keeping first-occurrence order"""
    return list(dict.fromkeys(ids))


# === ENUMS ===

class SessionMode(str, Enum):
    """Where auth and user data live for the rest of the process"""
    REMOTE_BACKEND = "remote_backend"
    LOCAL_MOCK = "local_mock"


class BootstrapState(str, Enum):
    INITIALIZING = "initializing"
    RESTORING_REMOTE = "restoring_remote"
    REMOTE_RESTORED = "remote_restored"
    FALLING_BACK_TO_MOCK = "falling_back_to_mock"
    MOCK_RESTORED = "mock_restored"
    UNAUTHENTICATED = "unauthenticated"


class SkillLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


# === USER DATA ===

class UserData(BaseModel):
    """Per-user interaction state: joined events, swipes, achievements"""
    model_config = ConfigDict(populate_by_name=True)

    events: List[str] = Field(default_factory=list)
    liked_matches: List[str] = Field(default_factory=list, alias="likedMatches")
    passed_matches: List[str] = Field(default_factory=list, alias="passedMatches")
    conversations: List[Any] = Field(default_factory=list)  # Opaque, ordered by relevance
    created_events: List[str] = Field(default_factory=list, alias="createdEvents")
    achievements: List[str] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=utcnow, alias="lastUpdated")

    @model_validator(mode="after")
    def repair_invariants(self) -> "UserData":
        """Records from storage or the backend may be sloppy; normalize them"""
        self.events = _unique(self.events)
        self.liked_matches = _unique(self.liked_matches)
        self.achievements = _unique(self.achievements)
        self.created_events = _unique(self.created_events)

        # Creating an event implies joining it
        joined = set(self.events)
        self.events.extend(e for e in self.created_events if e not in joined)

        # A match is either liked or passed, never both
        liked = set(self.liked_matches)
        self.passed_matches = [m for m in _unique(self.passed_matches) if m not in liked]

        if self.last_updated.tzinfo is None:
            self.last_updated = self.last_updated.replace(tzinfo=timezone.utc)
        return self

    def to_storage(self) -> dict:
        """Serialize with wire/storage field names"""
        return self.model_dump(mode="json", by_alias=True)


class UserDataUpdate(BaseModel):
    """Partial update - only fields that were set get merged"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    events: Optional[List[str]] = None
    liked_matches: Optional[List[str]] = Field(default=None, alias="likedMatches")
    passed_matches: Optional[List[str]] = Field(default=None, alias="passedMatches")
    conversations: Optional[List[Any]] = None
    created_events: Optional[List[str]] = Field(default=None, alias="createdEvents")
    achievements: Optional[List[str]] = None
    last_updated: Optional[datetime] = Field(default=None, alias="lastUpdated")


# === USER ===

class UserProfile(BaseModel):
    """Signed-in user as returned by GET /profile or the demo allow-list"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str
    email: str
    avatar_url: Optional[str] = Field(default=None, alias="avatarUrl")
    bio: str = ""
    sports: List[str] = Field(default_factory=list)
    skill_level: SkillLevel = Field(default=SkillLevel.BEGINNER, alias="skillLevel")
    location: str = ""
    preferred_days: List[str] = Field(default_factory=list, alias="preferredDays")
    preferred_times: List[str] = Field(default_factory=list, alias="preferredTimes")
    is_admin: bool = Field(default=False, alias="isAdmin")
    joined_date: Optional[date] = Field(default=None, alias="joinedDate")

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class UserProfileUpdate(BaseModel):
    """Data for updating the signed-in user's profile"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = None
    avatar_url: Optional[str] = Field(default=None, alias="avatarUrl")
    bio: Optional[str] = None
    sports: Optional[List[str]] = None
    skill_level: Optional[SkillLevel] = Field(default=None, alias="skillLevel")
    location: Optional[str] = None
    preferred_days: Optional[List[str]] = Field(default=None, alias="preferredDays")
    preferred_times: Optional[List[str]] = Field(default=None, alias="preferredTimes")


# === AUTH ===

class AuthState(BaseModel):
    """In-memory auth state exposed to the UI layer"""
    user: Optional[UserProfile] = None
    is_loading: bool = True
    is_authenticated: bool = False
    bootstrap_state: BootstrapState = BootstrapState.INITIALIZING


class RemoteSession(BaseModel):
    """What the auth backend tells us about the current session"""
    access_token: str
    user_id: Optional[str] = None
    email: Optional[str] = None
