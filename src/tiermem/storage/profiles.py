"""In-memory storage for the client's company profile.

The system serves a single client, so the repository holds at most one
profile. Saving over an existing profile keeps its identity and creation
time.
"""

import logging
from typing import Protocol

from tiermem.core.types import CompanyProfile

logger = logging.getLogger(__name__)


class CompanyProfileRepository(Protocol):
    """Storage contract for the company profile."""

    def get(self) -> CompanyProfile | None: ...

    def save(self, profile: CompanyProfile) -> CompanyProfile: ...

    def reset(self) -> None: ...


class InMemoryCompanyProfileRepository:
    """Holds the company profile in process memory.

    Attributes:
        profile: The stored profile, or None.
    """

    def __init__(self) -> None:
        self.profile: CompanyProfile | None = None

    def get(self) -> CompanyProfile | None:
        return self.profile

    def save(self, profile: CompanyProfile) -> CompanyProfile:
        """Store ``profile``, merging into the existing one if any.

        Args:
            profile: Profile to store.

        Returns:
            The stored profile. When a profile already exists, it keeps its
            ``id`` and ``created_at`` and takes every other field from
            ``profile``.
        """
        if self.profile is not None:
            profile = profile.model_copy(
                update={"id": self.profile.id, "created_at": self.profile.created_at}
            )
            logger.info(f"Updated company profile {profile.id}")
        else:
            logger.info(f"Saved company profile {profile.id}")

        self.profile = profile
        return profile

    def reset(self) -> None:
        self.profile = None
