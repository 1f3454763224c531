# product catalog, fetched from a published spreadsheet (CSV export)
from __future__ import annotations

import csv
import io
from typing import Dict, List, Optional

import httpx

from db.models import Product
from utils.logger import get_logger

_logger = get_logger(__name__)

LOAD_ERROR = "Could not load products"
_EXTRA_CELLS = "_extra"


class CatalogUnavailable(Exception):
    """No catalog source is configured."""


def _to_int(val) -> Optional[int]:
    try:
        return int(str(val).strip())
    except (TypeError, ValueError):
        return None


def _to_price(val) -> Optional[float]:
    text = str(val or "").strip().replace("$", "").replace(",", "")
    try:
        return float(text)
    except ValueError:
        return None


def parse_rows(text: str) -> List[Product]:
    """
    Map spreadsheet rows to products, one row per product.
    Columns: id, name, description, category, price, stock, image.
    Rows with a missing id, a non-numeric price/stock or more cells than the
    header (an unquoted comma in a text cell) are skipped.
    """
    reader = csv.DictReader(io.StringIO(text), restkey=_EXTRA_CELLS)
    products: List[Product] = []
    for line_no, raw in enumerate(reader, start=2):
        if _EXTRA_CELLS in raw:
            _logger.warning(f"Skipping catalog row {line_no}: too many cells.")
            continue
        row: Dict[str, str] = {
            (k or "").strip().lower(): (v or "").strip() for k, v in raw.items()
        }
        pid = _to_int(row.get("id"))
        price = _to_price(row.get("price"))
        stock = _to_int(row.get("stock"))
        if pid is None or price is None or stock is None or not row.get("name"):
            _logger.warning(f"Skipping malformed catalog row {line_no}: {raw}")
            continue
        products.append(
            Product(
                pid=pid,
                name=row["name"],
                description=row.get("description", ""),
                category=row.get("category", ""),
                price=price,
                stock=stock,
                image=row.get("image", ""),
            )
        )
    return products


class ProductFeed:
    """Read-only product source behind an HTTP URL."""

    def __init__(
        self,
        url: Optional[str],
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self.url = url
        self._client = client
        self._timeout = timeout

    async def fetch(self) -> List[Product]:
        if not self.url:
            raise CatalogUnavailable("No catalog URL configured (CATALOG_SHEET_URL).")

        if self._client is not None:
            response = await self._client.get(self.url)
        else:
            async with httpx.AsyncClient(
                timeout=self._timeout, follow_redirects=True
            ) as client:
                response = await client.get(self.url)
        response.raise_for_status()
        return parse_rows(response.text)


class CatalogLoader:
    """
    Holds the last good catalog plus loading/error state for the screen.

    A failed load keeps the previous products; calling `load()` again retries.
    """

    def __init__(self, feed: ProductFeed) -> None:
        self.feed = feed
        self.products: List[Product] = []
        self.loading = False
        self.error: Optional[str] = None

    async def load(self) -> bool:
        self.loading = True
        self.error = None
        try:
            products = await self.feed.fetch()
        except (
            httpx.HTTPError,
            httpx.InvalidURL,
            csv.Error,
            ValueError,
            CatalogUnavailable,
        ):
            _logger.exception("Catalog fetch failed.")
            self.error = LOAD_ERROR
            return False
        finally:
            self.loading = False

        self.products = products
        _logger.info(f"Loaded {len(products)} products.")
        return True

    def dismiss_error(self) -> None:
        self.error = None

    def get(self, pid: int) -> Optional[Product]:
        for p in self.products:
            if p.pid == pid:
                return p
        return None
