# reads store settings from the environment (and a .env file, if present)
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import find_dotenv, load_dotenv


def _load_env() -> None:
    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(env_path, override=False)


def _get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _get_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings.

    Contact constants are display-only and never validated.
    """

    phone_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    whatsapp_number: Optional[str] = None

    catalog_url: Optional[str] = None
    contact_url: Optional[str] = None

    db_path: str = "data/store.sqlite"
    simulated_delay: float = 2.0
    fetch_timeout: float = 10.0


def load_settings() -> Settings:
    _load_env()
    return Settings(
        phone_number=_get_env("STORE_PHONE_NUMBER"),
        email=_get_env("STORE_EMAIL"),
        address=_get_env("STORE_ADDRESS"),
        whatsapp_number=_get_env("STORE_WHATSAPP_NUMBER"),
        catalog_url=_get_env("CATALOG_SHEET_URL"),
        contact_url=_get_env("CONTACT_ENDPOINT_URL"),
        db_path=_get_env("STORE_DB_PATH", "data/store.sqlite"),
        simulated_delay=max(_get_float("SIMULATED_DELAY", 2.0), 0.0),
        fetch_timeout=max(_get_float("FETCH_TIMEOUT", 10.0), 0.1),
    )
