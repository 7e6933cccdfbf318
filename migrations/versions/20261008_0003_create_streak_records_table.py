"""Create streak_records table for daily practice history."""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261008_0003"
down_revision: Union[str, None] = "20261006_0002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "streak_records",
        sa.Column("learner_id", sa.BigInteger(), primary_key=True, autoincrement=False, nullable=False),
        sa.Column("history", sa.JSON(), nullable=False),
        sa.Column("current_streak", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("longest_streak", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            server_onupdate=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ("learner_id",),
            ("learners.learner_id",),
            name="fk_streak_records_learner_id_learners",
            ondelete="CASCADE",
        ),
    )


def downgrade() -> None:
    op.drop_table("streak_records")
