"""Customer directory models: saved shipping addresses and payment methods.

A user has at most one default row per collection. The partial unique
indexes below back that up at the database level.
"""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.store_service.models.enums import (
    AddressType,
    PaymentMethodType,
    enum_values,
)
from sqlalchemy import JSON, Boolean, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

DEFAULT_COUNTRY = "Pakistan"


class Address(Base):
    """Saved shipping addresses for registered users."""

    __tablename__ = "store_addresses"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    type: Mapped[AddressType] = mapped_column(
        SAEnum(
            AddressType,
            values_callable=enum_values,
            name="store_address_type_enum",
        ),
        default=AddressType.HOME,
        server_default="home",
    )

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    address: Mapped[str] = mapped_column(String(500), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    postal_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    country: Mapped[str] = mapped_column(
        String(100), default=DEFAULT_COUNTRY, server_default=DEFAULT_COUNTRY
    )
    landmark: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    is_default: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (
        Index(
            "uq_store_addresses_user_default",
            "user_id",
            unique=True,
            postgresql_where=text("is_default"),
            sqlite_where=text("is_default"),
        ),
    )

    def __repr__(self):
        return f"<Address {self.type} {self.city} default={self.is_default}>"


class PaymentMethod(Base):
    """Saved payment methods. Removing one only deactivates it."""

    __tablename__ = "store_payment_methods"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    method_type: Mapped[PaymentMethodType] = mapped_column(
        SAEnum(
            PaymentMethodType,
            values_callable=enum_values,
            name="store_payment_method_type_enum",
        ),
        nullable=False,
    )

    # Only the block matching method_type is set
    card: Mapped[Optional[dict]] = mapped_column(
        JSON, nullable=True
    )  # {"last4": "4242", "brand": "visa", "expiryMonth": 4, ...}
    bank: Mapped[Optional[dict]] = mapped_column(
        JSON, nullable=True
    )  # {"bankName": ..., "accountNumber": ..., "accountHolder": ...}
    wallet: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    is_default: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default="false"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default="true"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (
        Index(
            "uq_store_payment_methods_user_default",
            "user_id",
            unique=True,
            postgresql_where=text("is_default"),
            sqlite_where=text("is_default"),
        ),
    )

    def __repr__(self):
        return f"<PaymentMethod {self.method_type} default={self.is_default}>"
