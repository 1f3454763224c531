# provide dataclass models, plus their JSON mapping for the key-value store
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

PROFILE_FIELDS = (
    "birth_date",
    "gender",
    "address",
    "city",
    "postal_code",
    "country",
    "bio",
)


def _parse_dt(val: Any) -> datetime:
    if isinstance(val, datetime):
        dt = val
    elif isinstance(val, str):
        # JSON written by other tools may carry a trailing Z
        dt = datetime.fromisoformat(val.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Expected an ISO timestamp, got {val!r}")
    # timestamps are naive local time throughout
    if dt.tzinfo is not None:
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def _opt_str(val: Any) -> Optional[str]:
    return None if val is None else str(val)


@dataclass(frozen=True)
class UserStats:
    orders_placed: int = 12
    products_bought: int = 45
    total_savings: float = 125000
    points: int = 850

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserStats":
        return cls(
            orders_placed=int(data.get("orders_placed", 0)),
            products_bought=int(data.get("products_bought", 0)),
            total_savings=float(data.get("total_savings", 0)),
            points=int(data.get("points", 0)),
        )


def _default_notifications() -> Dict[str, bool]:
    return {"email": True, "push": True, "sms": False}


def _default_privacy() -> Dict[str, bool]:
    return {"public_profile": False, "share_data": False}


@dataclass(frozen=True)
class Preferences:
    notifications: Dict[str, bool] = field(default_factory=_default_notifications)
    language: str = "es"
    region: str = "CO"
    theme: str = "light"
    privacy: Dict[str, bool] = field(default_factory=_default_privacy)

    def merged(self, **changes) -> "Preferences":
        """
        Return a copy with `changes` applied.
        The notifications and privacy groups are merged key by key.
        """
        names = {f.name for f in dataclasses.fields(self)}
        unknown = set(changes) - names
        if unknown:
            raise ValueError(f"Unknown preference(s): {', '.join(sorted(unknown))}")

        for group in ("notifications", "privacy"):
            if group in changes:
                changes[group] = {**getattr(self, group), **dict(changes[group])}
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Preferences":
        return cls(
            notifications={
                **_default_notifications(),
                **{k: bool(v) for k, v in data.get("notifications", {}).items()},
            },
            language=str(data.get("language", "es")),
            region=str(data.get("region", "CO")),
            theme=str(data.get("theme", "light")),
            privacy={
                **_default_privacy(),
                **{k: bool(v) for k, v in data.get("privacy", {}).items()},
            },
        )


@dataclass(frozen=True)
class Activity:
    id: int
    timestamp: datetime
    type: str
    action: str
    description: str = ""
    status: str = "completed"
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "type": self.type,
            "action": self.action,
            "description": self.description,
            "status": self.status,
            "details": dict(self.details),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Activity":
        return cls(
            id=int(data["id"]),
            timestamp=_parse_dt(data["timestamp"]),
            type=str(data["type"]),
            action=str(data.get("action", "")),
            description=str(data.get("description", "")),
            status=str(data.get("status", "completed")),
            details=dict(data.get("details") or {}),
        )


@dataclass(frozen=True)
class UserRecord:
    """
    A registered account as stored, password included.
    """

    uid: int
    email: str
    pwd: str
    first_name: str
    last_name: str
    phone: str
    registered_at: datetime
    avatar: Optional[str] = None

    birth_date: Optional[str] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    bio: Optional[str] = None

    stats: Optional[UserStats] = None
    preferences: Optional[Preferences] = None
    activity: Tuple[Activity, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "uid": self.uid,
            "email": self.email,
            "pwd": self.pwd,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone": self.phone,
            "registered_at": self.registered_at.isoformat(),
            "avatar": self.avatar,
        }
        data.update({name: getattr(self, name) for name in PROFILE_FIELDS})
        data["stats"] = self.stats.to_dict() if self.stats else None
        data["preferences"] = self.preferences.to_dict() if self.preferences else None
        data["activity"] = [a.to_dict() for a in self.activity]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserRecord":
        stats = data.get("stats")
        prefs = data.get("preferences")
        return cls(
            uid=int(data["uid"]),
            email=str(data["email"]),
            pwd=str(data["pwd"]),
            first_name=str(data.get("first_name") or ""),
            last_name=str(data.get("last_name") or ""),
            phone=str(data.get("phone") or ""),
            registered_at=_parse_dt(data["registered_at"]),
            avatar=_opt_str(data.get("avatar")),
            **{name: _opt_str(data.get(name)) for name in PROFILE_FIELDS},
            stats=UserStats.from_dict(stats) if stats else None,
            preferences=Preferences.from_dict(prefs) if prefs else None,
            activity=tuple(Activity.from_dict(a) for a in data.get("activity") or ()),
        )


@dataclass(frozen=True)
class SessionUser:
    """
    The logged-in user: a UserRecord without its password, with
    display fields, stats and preferences always filled in.
    """

    uid: int
    email: str
    first_name: str
    last_name: str
    phone: str
    registered_at: datetime
    last_access: datetime
    stats: UserStats
    preferences: Preferences
    avatar: Optional[str] = None

    birth_date: Optional[str] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    bio: Optional[str] = None

    activity: Tuple[Activity, ...] = ()

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def initials(self) -> str:
        return f"{self.first_name[:1]}{self.last_name[:1]}".upper()

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "uid": self.uid,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone": self.phone,
            "registered_at": self.registered_at.isoformat(),
            "last_access": self.last_access.isoformat(),
            "avatar": self.avatar,
        }
        data.update({name: getattr(self, name) for name in PROFILE_FIELDS})
        data["stats"] = self.stats.to_dict()
        data["preferences"] = self.preferences.to_dict()
        data["activity"] = [a.to_dict() for a in self.activity]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SessionUser":
        if "pwd" in data:
            raise ValueError("A session record must not carry a password.")
        return cls(
            uid=int(data["uid"]),
            email=str(data["email"]),
            first_name=str(data["first_name"]),
            last_name=str(data["last_name"]),
            phone=str(data.get("phone") or ""),
            registered_at=_parse_dt(data["registered_at"]),
            last_access=_parse_dt(data["last_access"]),
            stats=UserStats.from_dict(data["stats"]),
            preferences=Preferences.from_dict(data["preferences"]),
            avatar=_opt_str(data.get("avatar")),
            **{name: _opt_str(data.get(name)) for name in PROFILE_FIELDS},
            activity=tuple(Activity.from_dict(a) for a in data.get("activity") or ()),
        )


@dataclass(frozen=True)
class Product:
    pid: int
    name: str
    description: str
    category: str
    price: float
    stock: int
    image: str = ""


@dataclass(frozen=True)
class CartLine:
    pid: int
    qty: int


@dataclass(frozen=True)
class ContactMessage:
    name: str
    email: str
    phone: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return dataclasses.asdict(self)


@dataclass(frozen=True)
class CatalogStats:
    total: int
    available: int
    low_stock: int
    out_of_stock: int
