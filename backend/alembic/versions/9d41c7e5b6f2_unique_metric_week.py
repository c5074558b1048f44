"""one value and one goal per (metric, week)

Revision ID: 9d41c7e5b6f2
Revises: 6b2e4d8f0a31
Create Date: 2024-11-04 14:15:00.000000

"""
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '9d41c7e5b6f2'
down_revision: Union[str, Sequence[str], None] = '6b2e4d8f0a31'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CONSTRAINTS = {
    'metric_values': 'uq_metric_values_metric_week',
    'goals': 'uq_goals_metric_week',
}


def upgrade() -> None:
    for table, name in CONSTRAINTS.items():
        # Keep the lowest id per (metric, week) before adding the constraint
        op.execute(
            f'DELETE FROM {table} WHERE id NOT IN '
            f'(SELECT MIN(id) FROM {table} GROUP BY metric_id, week_start)'
        )
        with op.batch_alter_table(table) as batch_op:
            batch_op.create_unique_constraint(name, ['metric_id', 'week_start'])


def downgrade() -> None:
    for table, name in CONSTRAINTS.items():
        with op.batch_alter_table(table) as batch_op:
            batch_op.drop_constraint(name, type_='unique')
