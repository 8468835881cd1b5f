"""Hold a plan change beside the active subscription until it is approved."""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "005_add_pending_plan_change"
down_revision = "004_add_markets"
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.add_column("subscriptions", sa.Column("pending_plan_id", sa.String(), nullable=True))
    op.add_column("subscriptions", sa.Column("pending_subscription_id", sa.String(), nullable=True))


def downgrade() -> None:
    op.drop_column("subscriptions", "pending_subscription_id")
    op.drop_column("subscriptions", "pending_plan_id")
