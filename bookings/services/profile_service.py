"""Profile service - maps identity-provider subjects to actor profiles."""

import logging

from bookings.domain import ActorId, ActorProfile, Role
from bookings.domain.errors import ValidationError
from bookings.stores.interfaces import BookingStore

logger = logging.getLogger(__name__)


class ProfileService:
    """Resolves the actor behind a request, creating its profile on first sight."""

    def __init__(self, store: BookingStore, default_role: Role = Role.CLIENT) -> None:
        self._store = store
        self._default_role = default_role

    def resolve_actor(
        self, subject: str, display_name: str = "", email: str = ""
    ) -> ActorProfile:
        try:
            actor_id = ActorId(value=subject.strip())
        except (ValueError, AttributeError) as exc:
            raise ValidationError("Actor id is required") from exc

        profile = self._store.get_profile(actor_id)
        if profile is not None:
            return profile

        profile = ActorProfile(
            id=actor_id,
            role=self._default_role,
            display_name=display_name.strip() or "New user",
            email=email.strip(),
        )
        self._store.save_profile(profile)
        logger.info("Created %s profile for %s", profile.role.value, actor_id)
        return profile
