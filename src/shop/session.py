from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, List, Optional, Protocol

from db.models import User
from db.store import KeyValueStore
from utils import config
from utils.logger import get_logger
from utils.pure import timestamp_id

_logger = get_logger(__name__)

LoadingListener = Callable[[bool], None]


class IdentityVerifier(Protocol):
    def verify(self, email: str, password: str) -> Optional[User]: ...

    def enroll(self, name: str, email: str, password: str) -> User: ...


class MockIdentityVerifier:
    """
    Accepts the fixed administrator pair, and otherwise anyone who typed
    both an email and a password. Nothing is checked against a user base.
    """

    def __init__(
        self, admin_email: str = config.ADMIN_EMAIL, admin_password: str = config.ADMIN_PASSWORD
    ) -> None:
        self.admin_email = admin_email
        self.admin_password = admin_password

    def verify(self, email: str, password: str) -> Optional[User]:
        if email == self.admin_email and password == self.admin_password:
            return User(id=1, name="Admin", email=email, is_admin=True)
        if email and password:
            return User(id=2, name=email.split("@")[0], email=email)
        return None

    def enroll(self, name: str, email: str, password: str) -> User:
        return User(id=timestamp_id(), name=name, email=email)


class SessionManager:
    """
    Owns the current-user value and its persisted session record.

    Fields:
      - user: the logged-in User, or None when anonymous
      - is_loading: True while login/register is in flight
    """

    def __init__(
        self,
        store: KeyValueStore,
        verifier: Optional[IdentityVerifier] = None,
        key: str = config.USER_KEY,
    ) -> None:
        self._store = store
        self._verifier = verifier or MockIdentityVerifier()
        self._key = key
        self._listeners: List[LoadingListener] = []
        self.user: Optional[User] = None
        self.is_loading = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.is_admin

    def add_loading_listener(self, listener: LoadingListener) -> None:
        self._listeners.append(listener)

    def remove_loading_listener(self, listener: LoadingListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _set_loading(self, flag: bool) -> None:
        self.is_loading = flag
        for listener in list(self._listeners):
            listener(flag)

    @contextmanager
    def _loading(self):
        self._set_loading(True)
        try:
            yield
        finally:
            self._set_loading(False)

    async def load(self) -> Optional[User]:
        """Restore a previously persisted session, if any."""
        raw = await self._store.get(self._key)
        if raw is None:
            self.user = None
            return None
        try:
            self.user = User.from_record(raw)
        except (KeyError, TypeError, ValueError, AttributeError):
            _logger.warning("Stored session is malformed; starting anonymous.")
            await self._store.remove(self._key)
            self.user = None
        return self.user

    async def _start(self, user: User) -> None:
        self.user = user
        await self._store.set(self._key, user.to_record())
        _logger.info(f"Session started for {user.email} (admin={user.is_admin}).")

    async def login(self, email: str, password: str) -> bool:
        with self._loading():
            user = self._verifier.verify(email, password)
            if user is None:
                return False
            await self._start(user)
            return True

    async def register(self, name: str, email: str, password: str) -> bool:
        with self._loading():
            await self._start(self._verifier.enroll(name, email, password))
            return True

    async def logout(self) -> None:
        if self.user:
            _logger.info(f"Session ended for {self.user.email}.")
        self.user = None
        await self._store.remove(self._key)
