"""add meetup sequence column

Revision ID: 003
Revises: 002
Create Date: 2026-02-08 16:45:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("meetups") as batch_op:
        batch_op.add_column(
            sa.Column("sequence", sa.Integer(), nullable=False, server_default="0")
        )

    # Backfill from the numeric id suffix (meetup_7 -> 7)
    op.execute(
        sa.text(
            "UPDATE meetups "
            "SET sequence = CAST(substr(id, instr(id, '_') + 1) AS INTEGER) "
            "WHERE instr(id, '_') > 0"
        )
    )


def downgrade() -> None:
    with op.batch_alter_table("meetups") as batch_op:
        batch_op.drop_column("sequence")
