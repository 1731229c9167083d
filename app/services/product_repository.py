"""Product persistence: CRUD and category lookups over SQLAlchemy."""
import logging
import re
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import ConflictError, StorageError, ValidationError
from app.models.product import Product, generate_product_id
from app.services.query_builder import FilterCondition, ProductQuery

logger = logging.getLogger(__name__)

# API field name -> mapped column
COLUMNS = {
    "id": Product.id,
    "name": Product.name,
    "description": Product.description,
    "price": Product.price,
    "category": Product.category,
    "imageUrl": Product.image_url,
    "inStock": Product.in_stock,
    "createdAt": Product.created_at,
    "updatedAt": Product.updated_at,
}

# Attributes callers may set; id and timestamps are managed here
WRITABLE_FIELDS = ("name", "description", "price", "category", "image_url", "in_stock")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _normalize_id(product_id: str) -> Optional[str]:
    """Return the canonical form of a product id, or None if malformed."""
    try:
        return str(uuid.UUID(str(product_id)))
    except ValueError:
        return None


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _search_clause(text: str):
    """Match any whitespace-separated term in name or description."""
    clauses = []
    for term in text.split():
        pattern = f"%{_escape_like(term)}%"
        clauses.append(Product.name.ilike(pattern, escape="\\"))
        clauses.append(Product.description.ilike(pattern, escape="\\"))
    return or_(*clauses)


def _assign(product: Product, data: dict[str, Any]) -> None:
    for field in WRITABLE_FIELDS:
        if field in data:
            value = data[field]
            setattr(product, field, value.strip() if isinstance(value, str) else value)


def _column_in_message(message: str) -> Optional[str]:
    # SQLite: "... failed: products.price"; PostgreSQL: 'column "price"'
    match = re.search(r'products\.(\w+)|column "(\w+)"', message)
    if match:
        return match.group(1) or match.group(2)
    return None


def _constraint_errors(error: IntegrityError) -> list[str]:
    """Messages for CHECK / NOT NULL breaches; empty for uniqueness."""
    message = str(error.orig)
    code = getattr(error.orig, "pgcode", None)
    lowered = message.lower()

    if code == "23514" or "check constraint" in lowered:
        if "price" in lowered:
            return ["Price cannot be negative"]
        return ["Product violates a store constraint"]

    if code == "23502" or "not null" in lowered or "null value" in lowered:
        column = _column_in_message(message)
        if column:
            return [f"Product {column.replace('_', ' ')} is required"]
        return ["A required product field is missing"]

    return []


def _unique_field(error: IntegrityError) -> Optional[str]:
    message = str(error.orig)
    # PostgreSQL detail: Key (name)=(Widget) already exists.
    match = re.search(r"Key \((\w+)\)", message)
    if match:
        return match.group(1)
    return _column_in_message(message)


def _filter_clause(condition: FilterCondition):
    if condition.operator == "text":
        return _search_clause(condition.value)

    column = COLUMNS[condition.field]
    if condition.operator == "eq":
        return column == condition.value
    if condition.operator == "gte":
        return column >= condition.value
    if condition.operator == "lte":
        return column <= condition.value
    raise ValueError(f"Unsupported filter operator: {condition.operator}")


class ProductRepository:
    """
    Data access for products.

    One instance wraps one request-scoped session. Failures surface as
    ValidationError (constraint violations), ConflictError (uniqueness) or
    StorageError (anything else from the store); nothing is retried.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _store_errors(self, action: str):
        try:
            yield
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Integrity error during {action}: {e.orig}")
            errors = _constraint_errors(e)
            if errors:
                raise ValidationError(errors) from e
            raise ConflictError(_unique_field(e)) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Store error during {action}: {e}", exc_info=True)
            raise StorageError(f"Failed to {action}") from e

    def list_products(self, query: ProductQuery) -> tuple[list[Product], int]:
        """
        Fetch one page of products and the total number of matches.

        The page and the count are two separate queries; under concurrent
        writes they are not guaranteed to agree.

        Args:
            query: Filters, sort keys and pagination window

        Returns:
            Tuple of (products on the requested page, total matching products)
        """
        with self._store_errors("list products"):
            db_query = self.db.query(Product)
            for condition in query.filters:
                db_query = db_query.filter(_filter_clause(condition))

            total = db_query.count()

            order_by = [
                COLUMNS[key.field].desc() if key.descending else COLUMNS[key.field].asc()
                for key in query.sort
            ]
            products = (
                db_query.order_by(*order_by)
                .offset(query.offset)
                .limit(query.limit)
                .all()
            )

        logger.debug(
            f"📦 Listed {len(products)} of {total} products "
            f"(page={query.page}, limit={query.limit})"
        )
        return products, total

    def get(self, product_id: str) -> Optional[Product]:
        """Get a product by id; None if absent or the id is malformed."""
        normalized = _normalize_id(product_id)
        if normalized is None:
            return None

        with self._store_errors("get product"):
            return self.db.query(Product).filter(Product.id == normalized).first()

    def create(self, data: dict[str, Any]) -> Product:
        """
        Create a product.

        Args:
            data: Product attributes (snake_case); unknown keys are ignored

        Returns:
            The persisted product with id and timestamps assigned
        """
        now = _utcnow()
        product = Product(
            id=generate_product_id(),
            created_at=now,
            updated_at=now,
            in_stock=True,
        )
        _assign(product, data)
        if product.in_stock is None:
            product.in_stock = True

        errors = product.constraint_violations()
        if errors:
            logger.warning(f"⚠️ Product rejected by store constraints: {errors}")
            raise ValidationError(errors)

        with self._store_errors("create product"):
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)

        logger.info(f"✅ Created product {product.id} ({product.name})")
        return product

    def update(self, product_id: str, data: dict[str, Any]) -> Optional[Product]:
        """
        Merge the supplied fields onto an existing product.

        The merged record is re-validated as a whole and updated_at is
        refreshed.

        Returns:
            The updated product, or None if it does not exist
        """
        product = self.get(product_id)
        if product is None:
            return None

        _assign(product, data)

        errors = product.constraint_violations()
        if errors:
            self.db.rollback()
            logger.warning(f"⚠️ Update of {product_id} rejected by store constraints: {errors}")
            raise ValidationError(errors)

        product.updated_at = _utcnow()

        with self._store_errors("update product"):
            self.db.commit()
            self.db.refresh(product)

        logger.info(f"✅ Updated product {product.id}")
        return product

    def delete(self, product_id: str) -> bool:
        """Delete a product; returns False if there was nothing to delete."""
        product = self.get(product_id)
        if product is None:
            return False

        with self._store_errors("delete product"):
            self.db.delete(product)
            self.db.commit()

        logger.info(f"🗑️ Deleted product {product_id}")
        return True

    def list_categories(self) -> list[str]:
        """Distinct categories currently in use, in no particular order."""
        with self._store_errors("list categories"):
            rows = self.db.query(Product.category).distinct().all()
        return [row[0] for row in rows]
