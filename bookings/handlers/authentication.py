"""Identity comes from the upstream identity provider.

The gateway in front of this service verifies the sign-in and forwards the
subject in ``X-Actor-Id``. The first request of a new subject creates its
profile with the default role.
"""

from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication
from rest_framework.request import Request

from bookings.domain import Actor, ActorProfile
from bookings.domain.errors import DomainError
from bookings.handlers.dependencies import build_services

ACTOR_HEADER = "X-Actor-Id"


class ActorPrincipal:
    """request.user for an identified actor."""

    is_authenticated = True
    is_anonymous = False

    def __init__(self, profile: ActorProfile) -> None:
        self.profile = profile

    @property
    def actor(self) -> Actor:
        return self.profile.as_actor()

    def __str__(self) -> str:
        return str(self.profile.id)


class IdentityHeaderAuthentication(BaseAuthentication):
    def authenticate(self, request: Request) -> tuple[ActorPrincipal, None] | None:
        subject = request.META.get("HTTP_X_ACTOR_ID", "").strip()
        if not subject:
            return None

        try:
            profile = build_services().profiles.resolve_actor(
                subject,
                display_name=request.META.get("HTTP_X_ACTOR_NAME", ""),
                email=request.META.get("HTTP_X_ACTOR_EMAIL", ""),
            )
        except DomainError as exc:
            raise exceptions.AuthenticationFailed(exc.message) from exc
        return ActorPrincipal(profile), None

    def authenticate_header(self, request: Request) -> str:
        return ACTOR_HEADER
