"""
Session and profile persistence.

Both stores wrap a single key of a KeyValueStore. Reads never raise:
anything that does not validate is logged and treated as absent.
"""

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from .models import InterviewSession, Profile
from .storage import KeyValueStore


__all__ = ["SessionStore", "ProfileStore", "SESSION_KEY", "PROFILE_KEY"]


logger = logging.getLogger(__name__)


SESSION_KEY = "ai_interview_state"
PROFILE_KEY = "ai_profile"


class SessionStore:
    """
    The one "current session" slot.

    Example:
        >>> store = SessionStore(InMemoryKeyValueStore())
        >>> store.load() is None
        True
        >>> store.save(session)
        >>> store.load().id == session.id
        True
    """

    def __init__(self, backend: KeyValueStore, key: str = SESSION_KEY) -> None:
        self._backend = backend
        self._key = key

    def load(self) -> Optional[InterviewSession]:
        """Return the persisted session, or None if absent or corrupt."""
        raw = self._backend.get(self._key)
        if raw is None:
            return None
        try:
            return InterviewSession.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                "Discarding corrupt session record under %s (%d errors)",
                self._key,
                e.error_count(),
            )
            return None

    def save(self, session: InterviewSession) -> None:
        """Overwrite the slot with ``session``."""
        self._backend.set(self._key, session.model_dump(mode="json", by_alias=True))

    def clear(self) -> None:
        self._backend.remove(self._key)


class ProfileStore:
    """Validated storage for the candidate profile entered before the interview."""

    def __init__(self, backend: KeyValueStore, key: str = PROFILE_KEY) -> None:
        self._backend = backend
        self._key = key

    def load(self) -> Optional[Profile]:
        raw = self._backend.get(self._key)
        if raw is None:
            return None
        try:
            return Profile.model_validate(raw)
        except ValidationError:
            logger.warning("Discarding corrupt profile record under %s", self._key)
            return None

    def save(self, profile: Union[Profile, Mapping[str, Any], None]) -> bool:
        """
        Validate and persist a profile.

        Args:
            profile: A Profile or a mapping with name, email and phone.

        Returns:
            True if stored, False if the profile is missing, not a mapping
            or invalid (nothing is written in that case).
        """
        if profile is None:
            return False
        if not isinstance(profile, Profile):
            try:
                profile = Profile.model_validate(dict(profile))
            except ValidationError as e:
                logger.info("Rejected profile: %d invalid field(s)", e.error_count())
                return False
            except (TypeError, ValueError):
                logger.info("Rejected profile: expected a mapping, got %s", type(profile).__name__)
                return False

        self._backend.set(self._key, profile.model_dump(mode="json"))
        return True
