"""add is_above_good polarity to metrics

Revision ID: 6b2e4d8f0a31
Revises: 1f3c9a7d2b10
Create Date: 2024-10-14 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '6b2e4d8f0a31'
down_revision: Union[str, Sequence[str], None] = '1f3c9a7d2b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    cols = {c['name'] for c in inspector.get_columns('metrics')}
    if 'is_above_good' not in cols:
        # Existing metrics keep "higher is better"
        op.add_column(
            'metrics',
            sa.Column('is_above_good', sa.Boolean(), nullable=False, server_default=sa.true()),
        )


def downgrade() -> None:
    with op.batch_alter_table('metrics') as batch_op:
        batch_op.drop_column('is_above_good')
