"""unique_active_booking_slot

Revision ID: 8f2b6c41d0e5
Revises: 3c9d1e7a2b40
Create Date: 2026-10-20 00:00:00.000000

"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "8f2b6c41d0e5"
down_revision: Union[str, None] = "3c9d1e7a2b40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_index(
        "uq_bookings_active_slot",
        "bookings",
        ["event_id", "date", "time"],
        unique=True,
        sqlite_where=sa.text("status != 'canceled'"),
        postgresql_where=sa.text("status != 'canceled'"),
    )


def downgrade() -> None:
    op.drop_index("uq_bookings_active_slot", table_name="bookings")
