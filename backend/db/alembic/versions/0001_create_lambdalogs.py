"""Create the invocation log table."""

from __future__ import annotations

from typing import Sequence
from typing import Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001_create_lambdalogs"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the lambdalogs table and its lookup indexes."""
    op.create_table(
        "lambdalogs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("timestamp", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("invocation_count", sa.Integer(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("aws_request_id", sa.Text(), nullable=False),
        sa.Column("cpu_cores", sa.Integer(), nullable=True),
        sa.Column("allocated_memory_mb", sa.Integer(), nullable=True),
        sa.Column("execution_deadline_ms", sa.BigInteger(), nullable=True),
        sa.Column("instance_id", sa.Text(), nullable=True),
    )
    op.create_index(
        "lambdalogs_aws_request_id_idx",
        "lambdalogs",
        ["aws_request_id"],
    )
    op.create_index(
        "lambdalogs_instance_id_idx",
        "lambdalogs",
        ["instance_id", "invocation_count"],
    )


def downgrade() -> None:
    """Drop the lambdalogs table."""
    op.drop_index("lambdalogs_instance_id_idx", table_name="lambdalogs")
    op.drop_index("lambdalogs_aws_request_id_idx", table_name="lambdalogs")
    op.drop_table("lambdalogs")
