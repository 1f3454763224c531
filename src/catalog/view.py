import unicodedata
from typing import Iterable, List, Sequence, Tuple

from db.models import CatalogStats, Product

SORT_OPTIONS = {
    "name": "Name",
    "price-asc": "Price: low to high",
    "price-desc": "Price: high to low",
    "stock": "Most stock first",
}

LOW_STOCK_LIMIT = 5


def _collation_key(name: str) -> Tuple[str, str]:
    """
    Accent- and case-insensitive ordering, close to what a locale
    collator does for Spanish/English names; ties fall back to the raw name.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base.casefold(), name


def apply_view(
    products: Sequence[Product],
    search_term: str = "",
    category: str = "all",
    sort_key: str = "name",
) -> List[Product]:
    """
    Filter and sort the catalog without touching the input.

    Search is a case-insensitive substring match on name, description and
    category. Sorting is stable; an unknown sort key keeps input order.
    """
    result = list(products)

    term = search_term.lower()
    if term:
        result = [
            p
            for p in result
            if term in p.name.lower()
            or term in p.description.lower()
            or (p.category and term in p.category.lower())
        ]

    if category != "all":
        result = [p for p in result if p.category and p.category == category]

    if sort_key == "name":
        result.sort(key=lambda p: _collation_key(p.name))
    elif sort_key == "price-asc":
        result.sort(key=lambda p: p.price)
    elif sort_key == "price-desc":
        result.sort(key=lambda p: p.price, reverse=True)
    elif sort_key == "stock":
        result.sort(key=lambda p: p.stock, reverse=True)

    return result


def categories(products: Iterable[Product]) -> List[str]:
    """"all" followed by each distinct category, first-seen order."""
    seen: List[str] = []
    for p in products:
        if p.category and p.category not in seen:
            seen.append(p.category)
    return ["all", *seen]


def stock_label(product: Product) -> str:
    if product.stock <= 0:
        return "Sold out"
    if product.stock <= LOW_STOCK_LIMIT:
        return "Last units!"
    return ""


def catalog_stats(products: Sequence[Product]) -> CatalogStats:
    return CatalogStats(
        total=len(products),
        available=sum(1 for p in products if p.stock > LOW_STOCK_LIMIT),
        low_stock=sum(1 for p in products if 0 < p.stock <= LOW_STOCK_LIMIT),
        out_of_stock=sum(1 for p in products if p.stock <= 0),
    )
