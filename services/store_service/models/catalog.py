"""Store catalog models."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

DEFAULT_CATEGORY = "General"


class Product(Base):
    """Sellable products. Orders copy title/price/image at checkout time."""

    __tablename__ = "store_products"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Pricing
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    original_price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(12, 2), nullable=True
    )  # Pre-sale price, shown struck through

    category: Mapped[str] = mapped_column(
        String(100),
        default=DEFAULT_CATEGORY,
        server_default=DEFAULT_CATEGORY,
        index=True,
    )
    images: Mapped[list] = mapped_column(JSON, default=list)  # ["https://cdn/..."]
    stock: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )

    variant_options: Mapped[Optional[dict]] = mapped_column(
        JSON, nullable=True
    )  # {"color": ["red", "blue"], "size": ["S", "M"]}
    specifications: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    # Review aggregates, recomputed whenever a review is added or removed
    rating: Mapped[float] = mapped_column(Float, default=0, server_default="0")
    num_reviews: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    @property
    def primary_image(self) -> Optional[str]:
        return self.images[0] if self.images else None

    def __repr__(self):
        return f"<Product {self.title}>"


class Review(Base):
    """Customer reviews. Each one counts toward its product's rating."""

    __tablename__ = "store_reviews"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("store_products.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Author
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    user_name: Mapped[str] = mapped_column(String(255), nullable=False)

    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    helpful: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="rating_range"),
        Index("ix_store_reviews_product_id_created_at", "product_id", "created_at"),
    )

    # Relationships
    product = relationship("Product")

    def __repr__(self):
        return f"<Review {self.rating}* product={self.product_id}>"
