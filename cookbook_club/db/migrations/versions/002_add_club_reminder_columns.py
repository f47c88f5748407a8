"""add club reminder policy and template columns

Revision ID: 002
Revises: 001
Create Date: 2025-12-14 10:30:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Existing clubs fall back to the default policy when the JSON is empty
    with op.batch_alter_table("clubs") as batch_op:
        batch_op.add_column(
            sa.Column("reminder_policy_json", sa.Text(), nullable=False, server_default="{}")
        )
        batch_op.add_column(
            sa.Column(
                "reminder_templates_json", sa.Text(), nullable=False, server_default="{}"
            )
        )


def downgrade() -> None:
    with op.batch_alter_table("clubs") as batch_op:
        batch_op.drop_column("reminder_templates_json")
        batch_op.drop_column("reminder_policy_json")
