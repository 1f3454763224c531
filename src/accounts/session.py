from __future__ import annotations

import dataclasses
import json
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from db.models import Activity, Preferences, SessionUser, UserRecord, UserStats
from db.seed import DEFAULT_USERS
from db.storage import CURRENT_USER_KEY, REGISTERED_USERS_KEY, StoragePort
from utils.logger import get_logger
from utils.results import Result

_logger = get_logger(__name__)

DEFAULT_FIRST_NAME = "User"
DEFAULT_LAST_NAME = "Demo"
DEFAULT_PHONE = "+57 300 123 4567"

INVALID_CREDENTIALS = "Invalid credentials"
EMAIL_TAKEN = "Email already registered"
NOT_LOGGED_IN = "You need to log in first"

_SESSION_FIELDS = {f.name for f in dataclasses.fields(SessionUser)}
_RECORD_FIELDS = {f.name for f in dataclasses.fields(UserRecord)}
_READ_ONLY_FIELDS = {"uid", "registered_at"}

# corrupt records surface as any of these while decoding
_DECODE_ERRORS = (ValueError, KeyError, TypeError, AttributeError)


class SessionManager:
    """
    Owns the registered-user list and the logged-in user, and mirrors both
    into the key-value store after every change.

    Two states: anonymous (`user is None`) and authenticated. `start()` picks
    the initial one from the stored session record.
    """

    def __init__(
        self,
        storage: StoragePort,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self._users: List[UserRecord] = []
        self._user: Optional[SessionUser] = None
        self._last_id = 0
        self.is_loading = True

    # ---------------------------
    # State
    # ---------------------------

    @property
    def user(self) -> Optional[SessionUser]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def registered_users(self) -> Tuple[UserRecord, ...]:
        return tuple(self._users)

    async def start(self) -> None:
        """Load both records from storage. Corrupt records never raise."""
        self.is_loading = True
        self._users = await self._load_users()
        self._user = await self._load_session()
        self.is_loading = False
        _logger.info(
            f"Session manager ready: {len(self._users)} registered user(s), "
            f"{'authenticated' if self._user else 'anonymous'}."
        )

    async def _load_users(self) -> List[UserRecord]:
        raw = await self._storage.load(REGISTERED_USERS_KEY)
        if raw is not None:
            try:
                return [UserRecord.from_dict(d) for d in json.loads(raw)]
            except _DECODE_ERRORS:
                _logger.exception("Stored user list is unreadable, reseeding.")

        users = list(DEFAULT_USERS)
        await self._save_users(users)
        return users

    async def _load_session(self) -> Optional[SessionUser]:
        raw = await self._storage.load(CURRENT_USER_KEY)
        if raw is None:
            return None
        try:
            return SessionUser.from_dict(json.loads(raw))
        except _DECODE_ERRORS:
            _logger.exception("Stored session is unreadable, logging out.")
            await self._storage.remove(CURRENT_USER_KEY)
            return None

    async def _save_users(self, users: List[UserRecord]) -> None:
        await self._storage.save(
            REGISTERED_USERS_KEY, json.dumps([u.to_dict() for u in users])
        )

    async def _save_session(self) -> None:
        await self._storage.save(CURRENT_USER_KEY, json.dumps(self._user.to_dict()))

    def _next_id(self) -> int:
        """Millisecond timestamp, bumped past every id handed out before."""
        now_ms = int(self._clock().timestamp() * 1000)
        floor = max([self._last_id, *(u.uid for u in self._users)])
        self._last_id = max(now_ms, floor + 1)
        return self._last_id

    # ---------------------------
    # Registration & login
    # ---------------------------

    def email_available(self, email: str) -> bool:
        return not any(u.email == email for u in self._users)

    async def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        phone: str,
    ) -> Result[UserRecord]:
        if not self.email_available(email):
            return Result.failure(EMAIL_TAKEN)

        record = UserRecord(
            uid=self._next_id(),
            email=email,
            pwd=password,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            registered_at=self._clock(),
        )
        self._users = [*self._users, record]
        await self._save_users(self._users)
        _logger.info(f"Registered user {record.uid} <{email}>.")
        return Result.success(record)

    def _find_user(self, email: str, password: str) -> Optional[UserRecord]:
        for u in self._users:
            if u.email == email and u.pwd == password:
                return u
        return None

    async def login(self, email: str, password: str) -> Result[SessionUser]:
        found = self._find_user(email, password)
        if found is None:
            _logger.info("Login rejected.")
            return Result.failure(INVALID_CREDENTIALS)

        now = self._clock()
        data: Dict[str, Any] = {
            name: getattr(found, name)
            for name in _RECORD_FIELDS & _SESSION_FIELDS
        }
        data.update(
            first_name=found.first_name or DEFAULT_FIRST_NAME,
            last_name=found.last_name or DEFAULT_LAST_NAME,
            phone=found.phone or DEFAULT_PHONE,
            last_access=now,
            stats=found.stats or UserStats(),
            preferences=found.preferences or Preferences(),
        )
        self._user = SessionUser(**data)
        await self._save_session()
        await self.add_activity("login", "Logged in", "Signed in to the store")
        _logger.info(f"User {found.uid} logged in.")
        return Result.success(self._user)

    async def logout(self) -> None:
        if self._user is not None:
            _logger.info(f"User {self._user.uid} logged out.")
        self._user = None
        await self._storage.remove(CURRENT_USER_KEY)

    # ---------------------------
    # Profile
    # ---------------------------

    async def update_user(self, **changes) -> Result[SessionUser]:
        """
        Shallow-merge `changes` into the session user and into the matching
        registered record.
        """
        unknown = set(changes) - _SESSION_FIELDS
        if unknown:
            raise ValueError(f"Unknown user field(s): {', '.join(sorted(unknown))}")
        read_only = set(changes) & _READ_ONLY_FIELDS
        if read_only:
            raise ValueError(f"Read-only user field(s): {', '.join(sorted(read_only))}")

        if self._user is None:
            return Result.failure(NOT_LOGGED_IN)

        self._user = dataclasses.replace(self._user, **changes)
        await self._save_session()

        record_changes = {k: v for k, v in changes.items() if k in _RECORD_FIELDS}
        self._users = [
            dataclasses.replace(u, **record_changes) if u.uid == self._user.uid else u
            for u in self._users
        ]
        await self._save_users(self._users)
        return Result.success(self._user)

    async def update_preferences(self, **changes) -> Result[SessionUser]:
        if self._user is None:
            return Result.failure(NOT_LOGGED_IN)

        preferences = self._user.preferences.merged(**changes)
        self._user = dataclasses.replace(self._user, preferences=preferences)
        await self._save_session()
        return Result.success(self._user)

    async def add_activity(
        self,
        type: str,
        action: str,
        description: str = "",
        status: str = "completed",
        details: Optional[Dict[str, Any]] = None,
    ) -> Result[Activity]:
        if self._user is None:
            return Result.failure(NOT_LOGGED_IN)

        entry = Activity(
            id=self._next_id(),
            timestamp=self._clock(),
            type=type,
            action=action,
            description=description,
            status=status,
            details=dict(details or {}),
        )
        self._user = dataclasses.replace(
            self._user, activity=(entry, *self._user.activity)
        )
        await self._save_session()
        return Result.success(entry)

    async def change_password(self, current: str, new: str) -> Result[None]:
        if self._user is None:
            return Result.failure(NOT_LOGGED_IN)

        uid = self._user.uid
        record = next((u for u in self._users if u.uid == uid), None)
        if record is None or record.pwd != current:
            return Result.failure("Current password is incorrect")

        self._users = [
            dataclasses.replace(u, pwd=new) if u.uid == uid else u
            for u in self._users
        ]
        await self._save_users(self._users)
        await self.add_activity("security", "Password changed", "Password updated")
        _logger.info(f"User {uid} changed their password.")
        return Result.success()
