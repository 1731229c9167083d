"""Translate list-endpoint query parameters into a product query."""
import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from app.errors import ValidationError

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

# Keeps (page - 1) * limit inside a 64-bit OFFSET
MAX_PAGING_VALUE = 2**31 - 1

# API field names accepted in the `sort` parameter
SORTABLE_FIELDS = {
    "id",
    "name",
    "description",
    "price",
    "category",
    "imageUrl",
    "inStock",
    "createdAt",
    "updatedAt",
}

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterCondition:
    """A single predicate: `field` `operator` `value`."""

    field: str
    operator: str  # eq, gte, lte, text
    value: Any


@dataclass(frozen=True)
class SortKey:
    field: str
    descending: bool = False


DEFAULT_SORT = (SortKey("createdAt", descending=True),)


@dataclass(frozen=True)
class ProductQuery:
    """Filter, sort and pagination window for the product listing."""

    filters: tuple[FilterCondition, ...] = ()
    sort: tuple[SortKey, ...] = DEFAULT_SORT
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _positive_int(params: Mapping[str, str], name: str, default: int) -> int:
    raw = params.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError([f"{name} must be a positive integer"])
    if value < 1:
        raise ValidationError([f"{name} must be a positive integer"])
    if value > MAX_PAGING_VALUE:
        raise ValidationError([f"{name} cannot exceed {MAX_PAGING_VALUE}"])
    return value


def _price_bound(params: Mapping[str, str], name: str) -> Optional[float]:
    raw = params.get(name)
    if raw is None or raw == "":
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ValidationError([f"{name} must be a number"])
    if not math.isfinite(value):
        raise ValidationError([f"{name} must be a number"])
    return value


def parse_sort(raw: Optional[str]) -> tuple[SortKey, ...]:
    """
    Parse a sort expression such as ``price:asc,name:desc``.

    Direction ``desc`` sorts descending; anything else sorts ascending.
    Unknown fields are skipped. Falls back to newest first.
    """
    if not raw:
        return DEFAULT_SORT

    keys = []
    for part in raw.split(","):
        field, _, direction = part.strip().partition(":")
        field = field.strip()
        if not field:
            continue
        if field not in SORTABLE_FIELDS:
            logger.warning(f"⚠️ Ignoring unknown sort field: {field}")
            continue
        keys.append(SortKey(field, descending=direction.strip() == "desc"))

    return tuple(keys) or DEFAULT_SORT


def build_product_query(
    params: Mapping[str, str], max_limit: Optional[int] = None
) -> ProductQuery:
    """
    Build a ProductQuery from raw query-string values.

    Args:
        params: Query parameters (page, limit, category, minPrice, maxPrice,
            inStock, sort, search)
        max_limit: Optional cap applied to `limit`

    Returns:
        ProductQuery ready to hand to the repository

    Raises:
        ValidationError: if page, limit or a price bound is malformed
    """
    filters = []

    category = (params.get("category") or "").strip()
    if category:
        filters.append(FilterCondition("category", "eq", category))

    in_stock = params.get("inStock")
    if in_stock is not None:
        filters.append(FilterCondition("inStock", "eq", in_stock == "true"))

    min_price = _price_bound(params, "minPrice")
    if min_price is not None:
        filters.append(FilterCondition("price", "gte", min_price))

    max_price = _price_bound(params, "maxPrice")
    if max_price is not None:
        filters.append(FilterCondition("price", "lte", max_price))

    search = params.get("search")
    if search and search.strip():
        filters.append(FilterCondition("search", "text", search.strip()))

    page = _positive_int(params, "page", DEFAULT_PAGE)
    limit = _positive_int(params, "limit", DEFAULT_LIMIT)
    if max_limit is not None and limit > max_limit:
        logger.debug(f"Clamping limit {limit} to {max_limit}")
        limit = max_limit

    return ProductQuery(
        filters=tuple(filters),
        sort=parse_sort(params.get("sort")),
        page=page,
        limit=limit,
    )
