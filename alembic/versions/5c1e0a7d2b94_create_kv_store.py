"""Create kv_store table

Revision ID: 5c1e0a7d2b94
Revises:
Create Date: 2026-10-18 10:12:04.118230

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '5c1e0a7d2b94'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Flat key/value namespace; composite keys carry every index
    op.create_table(
        'kv_store',
        sa.Column('key', sa.String(length=512), nullable=False),
        sa.Column('value', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.PrimaryKeyConstraint('key')
    )
    # Byte-order index so prefix scans (LIKE 'user_files:<owner>:%') can use it
    op.execute('CREATE INDEX ix_kv_store_key_pattern ON kv_store (key text_pattern_ops)')


def downgrade() -> None:
    op.execute('DROP INDEX IF EXISTS ix_kv_store_key_pattern')
    op.drop_table('kv_store')
