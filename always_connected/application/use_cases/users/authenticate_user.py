"""Use case for authenticating a participant with the shared secret."""

from enum import Enum, auto

from sqlalchemy.orm import Session

from always_connected.config import Settings
from always_connected.domain.entities import Participant, User
from always_connected.infrastructure.repositories import UserRepository
from always_connected.infrastructure.security import verify_shared_secret


class AuthenticationStatus(Enum):
    """Possible outcomes when attempting to authenticate a participant."""

    SUCCESS = auto()
    UNKNOWN_USER = auto()
    INVALID_CREDENTIALS = auto()


def authenticate_user(
    session: Session,
    user_id: str,
    password: str,
    *,
    settings: Settings | None = None,
) -> tuple[User | None, AuthenticationStatus]:
    """Return the authentication result along with the user when possible.

    The user record is created on the first successful login.
    """

    participant = Participant.parse(user_id)
    if participant is None:
        return None, AuthenticationStatus.UNKNOWN_USER

    if not verify_shared_secret(password, settings=settings):
        return None, AuthenticationStatus.INVALID_CREDENTIALS

    user = UserRepository(session).find_or_create(participant)
    return user, AuthenticationStatus.SUCCESS
