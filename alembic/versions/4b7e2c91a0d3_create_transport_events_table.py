"""create_transport_events_table

Revision ID: 4b7e2c91a0d3
Revises: 
Create Date: 2026-10-18 09:12:44.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b7e2c91a0d3'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # gen_random_uuid() is built in from PostgreSQL 13; older engines need pgcrypto
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    # Append-only event log
    op.execute("""
        CREATE TABLE transport_events (
            id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
            reference_type VARCHAR(20) NOT NULL,
            reference_id VARCHAR(64) NOT NULL,
            event_type VARCHAR(64) NOT NULL,
            event_time TIMESTAMPTZ NOT NULL,
            sequence INTEGER NOT NULL,
            stop_id VARCHAR(64),
            latitude DOUBLE PRECISION,
            longitude DOUBLE PRECISION,
            actor_type VARCHAR(20) NOT NULL,
            actor_id VARCHAR(64),
            description TEXT,
            location_text TEXT,
            payload JSONB,
            external_event_id VARCHAR(255),
            source VARCHAR(30) NOT NULL DEFAULT 'manual',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT chk_transport_events_reference_type CHECK (reference_type IN ('trip', 'shipment')),
            CONSTRAINT chk_transport_events_sequence CHECK (sequence >= 1),
            CONSTRAINT uq_transport_events_reference_sequence UNIQUE (reference_type, reference_id, sequence),
            CONSTRAINT uq_transport_events_external_event_id UNIQUE (external_event_id)
        )
    """)

    # Feed ordering: most recent first, insertion order breaks ties
    op.execute("""
        CREATE INDEX idx_transport_events_feed
        ON transport_events (event_time DESC, sequence DESC)
    """)

    op.execute("""
        CREATE INDEX idx_transport_events_reference_type
        ON transport_events (reference_type)
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP INDEX IF EXISTS idx_transport_events_reference_type")
    op.execute("DROP INDEX IF EXISTS idx_transport_events_feed")
    op.execute("DROP TABLE IF EXISTS transport_events")
