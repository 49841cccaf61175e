"""Abstract base class for profile persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod

from musicboard.models.profile import Profile


class IProfileProvider(ABC):
    """Contract for profile stores.  One profile per authenticated user."""

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables and indices if they don't exist.  Called at startup."""

    @abstractmethod
    async def upsert_profile(self, profile: Profile) -> Profile:
        """Create or update the profile keyed by ``profile.id``.

        Raises
        ------
        musicboard.utils.errors.ValidationFailureError
            If ``profile.username`` already belongs to another user.
        """

    @abstractmethod
    async def get_profile(self, user_id: str) -> Profile | None:
        """Return the profile for *user_id*, or ``None``."""

    @abstractmethod
    async def get_profile_by_username(self, username: str) -> Profile | None:
        """Return the profile with *username*, or ``None``."""

    @abstractmethod
    async def get_profiles(self, user_ids: list[str]) -> dict[str, Profile]:
        """Return the profiles of *user_ids* that exist, keyed by user id."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
