"""SQLAlchemy ORM model for the append-only transport_events table."""

from sqlalchemy import CheckConstraint, Double, Index, Integer, String, Text, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column

from tracklog.db.schemas.base import Base

REFERENCE_SEQUENCE_CONSTRAINT = "uq_transport_events_reference_sequence"
EXTERNAL_EVENT_ID_CONSTRAINT = "uq_transport_events_external_event_id"


class TransportEvent(Base):
    __tablename__ = "transport_events"

    id: Mapped[str] = mapped_column(UUID, primary_key=True, server_default=text("gen_random_uuid()"))
    reference_type: Mapped[str] = mapped_column(String(20), nullable=False)
    reference_id: Mapped[str] = mapped_column(String(64), nullable=False)
    event_type: Mapped[str] = mapped_column(String(64), nullable=False)
    event_time = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    stop_id: Mapped[str | None] = mapped_column(String(64))
    latitude: Mapped[float | None] = mapped_column(Double)
    longitude: Mapped[float | None] = mapped_column(Double)
    actor_type: Mapped[str] = mapped_column(String(20), nullable=False)
    actor_id: Mapped[str | None] = mapped_column(String(64))
    description: Mapped[str | None] = mapped_column(Text)
    location_text: Mapped[str | None] = mapped_column(Text)
    payload = mapped_column(JSONB)
    external_event_id: Mapped[str | None] = mapped_column(String(255))
    source: Mapped[str] = mapped_column(String(30), nullable=False, server_default="manual")
    created_at = mapped_column(TIMESTAMP(timezone=True), nullable=False, server_default=text("NOW()"))

    __table_args__ = (
        CheckConstraint("reference_type IN ('trip', 'shipment')", name="reference_type"),
        CheckConstraint("sequence >= 1", name="sequence"),
        UniqueConstraint("reference_type", "reference_id", "sequence", name=REFERENCE_SEQUENCE_CONSTRAINT),
        UniqueConstraint("external_event_id", name=EXTERNAL_EVENT_ID_CONSTRAINT),
        Index("idx_transport_events_feed", text("event_time DESC"), text("sequence DESC")),
        Index("idx_transport_events_reference_type", "reference_type"),
    )
