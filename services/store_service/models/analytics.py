"""Analytics event log."""

import uuid
from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.store_service.models.enums import AnalyticsEventType, enum_values
from sqlalchemy import JSON, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column


class AnalyticsEvent(Base):
    """Raw tracked events. Aggregation happens outside this service."""

    __tablename__ = "store_analytics_events"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    event_type: Mapped[AnalyticsEventType] = mapped_column(
        SAEnum(
            AnalyticsEventType,
            values_callable=enum_values,
            name="store_analytics_event_type_enum",
        ),
        nullable=False,
    )

    user_id: Mapped[str] = mapped_column(
        String(255), default="anonymous", server_default="anonymous"
    )
    session_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    product_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    order_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    page_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    # "metadata" is reserved on declarative classes
    event_metadata: Mapped[Optional[dict]] = mapped_column(
        "metadata", JSON, nullable=True
    )

    user_agent: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    __table_args__ = (
        Index("ix_store_analytics_events_type_created", "event_type", "created_at"),
        Index("ix_store_analytics_events_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<AnalyticsEvent {self.event_type} user={self.user_id}>"
