from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from accounts.session import SessionManager
from catalog.cart import Cart
from catalog.feed import CatalogLoader, ProductFeed
from contact.client import ContactClient, ContactInfo
from db.storage import MemoryStorage, SqliteStorage, StoragePort
from utils.config import Settings


@dataclass
class AppState:
    """
    Application state handed to every screen through the app.

    Fields:
      - settings: runtime configuration
      - session: registered users and the logged-in user
      - catalog: product list with loading/error state
      - cart: product id -> quantity, backed by the catalog's stock
      - contact: contact form endpoint
      - contact_info: phone/email/address/WhatsApp shown to customers
    """

    settings: Settings
    session: SessionManager
    catalog: CatalogLoader
    cart: Cart
    contact: ContactClient
    contact_info: ContactInfo

    @classmethod
    def build(
        cls, settings: Settings, storage: Optional[StoragePort] = None
    ) -> "AppState":
        storage = storage or SqliteStorage(settings.db_path)
        catalog = CatalogLoader(
            ProductFeed(settings.catalog_url, timeout=settings.fetch_timeout)
        )
        return cls(
            settings=settings,
            session=SessionManager(storage),
            catalog=catalog,
            cart=Cart(catalog.get),
            contact=ContactClient(settings.contact_url, timeout=settings.fetch_timeout),
            contact_info=ContactInfo.from_settings(settings),
        )

    @classmethod
    def in_memory(cls, settings: Settings) -> "AppState":
        return cls.build(settings, MemoryStorage())

    async def start(self) -> None:
        """Restore the session and fetch the catalog once."""
        await self.session.start()
        await self.catalog.load()
