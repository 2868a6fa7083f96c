"""room_images

Revision ID: 8b1e5c0d2a6f
Revises: 3f9c2a7d1b04
Create Date: 2026-10-19 14:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8b1e5c0d2a6f'
down_revision: Union[str, Sequence[str], None] = '3f9c2a7d1b04'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "room_images",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("room_id", sa.Uuid(), sa.ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False),
        sa.Column("image_url", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_room_images_room_id", "room_images", ["room_id"])


def downgrade() -> None:
    op.drop_index("ix_room_images_room_id", table_name="room_images")
    op.drop_table("room_images")
