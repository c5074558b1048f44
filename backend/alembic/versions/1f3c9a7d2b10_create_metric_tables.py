"""create metrics, metric_values and goals tables

Revision ID: 1f3c9a7d2b10
Revises:
Create Date: 2024-09-30 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '1f3c9a7d2b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    tables = inspector.get_table_names()
    if 'metrics' not in tables:
        op.create_table(
            'metrics',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('name', sa.String(), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('team', sa.String(), nullable=True),
            sa.Column('country', sa.String(), nullable=True),
        )
        op.create_index('ix_metrics_id', 'metrics', ['id'])
        op.create_index('ix_metrics_team', 'metrics', ['team'])
        op.create_index('ix_metrics_country', 'metrics', ['country'])

    for table, amount in (('metric_values', 'value'), ('goals', 'target_value')):
        if table in tables:
            continue
        op.create_table(
            table,
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column(
                'metric_id',
                sa.Integer(),
                sa.ForeignKey('metrics.id', ondelete='CASCADE'),
                nullable=False,
            ),
            sa.Column(amount, sa.Float(), nullable=False),
            sa.Column('week_start', sa.Date(), nullable=False),
        )
        op.create_index(f'ix_{table}_id', table, ['id'])
        op.create_index(f'ix_{table}_metric_id', table, ['metric_id'])
        op.create_index(f'ix_{table}_week_start', table, ['week_start'])


def downgrade() -> None:
    op.execute('DROP TABLE IF EXISTS goals')
    op.execute('DROP TABLE IF EXISTS metric_values')
    op.execute('DROP TABLE IF EXISTS metrics')
