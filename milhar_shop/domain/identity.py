"""Identity session - who is operating the shop right now"""

import logging
from datetime import datetime
from typing import Callable, Optional

from pydantic import ValidationError

from milhar_shop.domain.directory import UserDirectory
from milhar_shop.domain.exceptions import AuthenticationError
from milhar_shop.domain.models import User
from milhar_shop.infrastructure.database.repositories import LocalStorage
from milhar_shop.infrastructure.database.schemas import StoredUser
from milhar_shop.utils.date_utils import now_local

USER_KEY = "milhar_user"
LOGIN_TIME_KEY = "milhar_login_time"

logger = logging.getLogger(__name__)


class IdentitySession:
    """
    Current user of the shop, persisted so a restart does not force a new login.

    States: no session, or active with exactly one user. Only login,
    logout and restore_session change state.
    """

    def __init__(
        self,
        directory: UserDirectory,
        storage: LocalStorage,
        clock: Callable[[], datetime] = now_local,
    ):
        self.directory = directory
        self.storage = storage
        self._clock = clock
        self._user: Optional[User] = None

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def is_admin(self) -> bool:
        return self._user is not None and self._user.is_admin

    @property
    def login_time(self) -> Optional[datetime]:
        raw = self.storage.get_item(LOGIN_TIME_KEY)
        if raw is None:
            return None
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            return None

    def login(self, username: str, password: str) -> User:
        """
        Authenticate against the roster and start a session.

        Wrong username, wrong password and blocked account all raise the
        same error so callers cannot tell which one happened.

        Raises:
            AuthenticationError: When no active roster entry matches
        """
        user = self.directory.authenticate(username, password)
        if user is None:
            raise AuthenticationError("Invalid username or password")

        try:
            record = StoredUser.from_user(user).model_dump_json()
        except ValidationError as e:
            logger.error(
                "Roster entry cannot be stored as a session",
                extra={"user_id": user.id, "error_count": e.error_count()},
            )
            raise AuthenticationError("Invalid username or password") from e

        # Session becomes current only once it is durable
        self.storage.set_item(USER_KEY, record)
        self.storage.set_item(LOGIN_TIME_KEY, self._clock().isoformat())
        self._user = user
        return user

    def logout(self) -> None:
        self._user = None
        self.storage.remove_item(USER_KEY)
        self.storage.remove_item(LOGIN_TIME_KEY)

    def restore_session(self) -> Optional[User]:
        """
        Reload the user saved by a previous login.

        The record is trusted as stored and not checked against the roster
        again. A record that fails to parse is deleted and no session is
        restored.
        """
        raw = self.storage.get_item(USER_KEY)
        if raw is None:
            return None

        try:
            user = StoredUser.model_validate_json(raw).to_user()
        except ValidationError as e:
            logger.warning("Discarding malformed stored session", extra={"error_count": e.error_count()})
            self.storage.remove_item(USER_KEY)
            return None

        self._user = user
        return user
