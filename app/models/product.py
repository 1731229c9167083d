"""Product model."""
import math
import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Float, String, Text

from app.database import Base

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 2000


def _finite(value) -> bool:
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def generate_product_id() -> str:
    return str(uuid.uuid4())


class Product(Base):
    """Product model for storing catalog entries."""

    __tablename__ = "products"

    id = Column(String(36), primary_key=True, default=generate_product_id)
    name = Column(String(NAME_MAX_LENGTH), nullable=False, index=True)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    category = Column(String(255), nullable=False, index=True)
    image_url = Column(String(2048), nullable=True)
    in_stock = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    def constraint_violations(self) -> list[str]:
        """
        Check the record against the schema rules enforced by the store.

        Returns:
            List of violation messages, empty when the record is valid
        """
        errors = []

        if not isinstance(self.name, str) or not self.name:
            errors.append("Product name is required")
        elif len(self.name) > NAME_MAX_LENGTH:
            errors.append(f"Product name cannot exceed {NAME_MAX_LENGTH} characters")

        if not isinstance(self.description, str) or not self.description:
            errors.append("Product description is required")
        elif len(self.description) > DESCRIPTION_MAX_LENGTH:
            errors.append(f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters")

        if self.price is None:
            errors.append("Product price is required")
        elif (
            isinstance(self.price, bool)
            or not isinstance(self.price, (int, float))
            or not _finite(self.price)
        ):
            errors.append("Price must be a number")
        elif self.price < 0:
            errors.append("Price cannot be negative")

        if not isinstance(self.category, str) or not self.category:
            errors.append("Product category is required")

        if self.image_url is not None and not isinstance(self.image_url, str):
            errors.append("Image URL must be a string")

        if self.in_stock is not None and not isinstance(self.in_stock, bool):
            errors.append("In-stock flag must be a boolean")

        return errors

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', category='{self.category}')>"
