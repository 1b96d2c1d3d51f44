"""create money book schema

Revision ID: 3b7e1c2a9f10
Revises:
Create Date: 2026-10-19 06:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '3b7e1c2a9f10'
down_revision = None
branch_labels = None
depends_on = None

ASSET_TYPES = ('gold', 'stock', 'etf', 'mutual_fund', 'bond', 'crypto', 'other')
TRANSACTION_TYPES = ('buy', 'sell', 'dividend', 'fee', 'adjustment')


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    ]


def upgrade() -> None:
    # Users
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('is_superuser', sa.Boolean(), nullable=False, server_default='false'),
        *_timestamps(),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    # Money books and pockets
    op.create_table(
        'money_books',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('has_investment_portfolio', sa.Boolean(), nullable=False, server_default='false'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_money_books_id', 'money_books', ['id'])
    op.create_index('ix_money_books_user_id', 'money_books', ['user_id'])

    op.create_table(
        'pockets',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('money_book_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('percentage', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['money_book_id'], ['money_books.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_pockets_id', 'pockets', ['id'])
    op.create_index('ix_pockets_money_book_id', 'pockets', ['money_book_id'])

    # Allocations
    op.create_table(
        'allocations',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('money_book_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('source_amount', sa.BigInteger(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['money_book_id'], ['money_books.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_allocations_id', 'allocations', ['id'])
    op.create_index('ix_allocations_money_book_id', 'allocations', ['money_book_id'])
    op.create_index('ix_allocations_date', 'allocations', ['date'])

    op.create_table(
        'allocation_items',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('allocation_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('pocket_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('pocket_name', sa.String(length=255), nullable=False),
        sa.Column('pocket_percentage', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('amount', sa.BigInteger(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.ForeignKeyConstraint(['allocation_id'], ['allocations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['pocket_id'], ['pockets.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_allocation_items_id', 'allocation_items', ['id'])
    op.create_index('ix_allocation_items_allocation_id', 'allocation_items', ['allocation_id'])
    op.create_index('ix_allocation_items_pocket_id', 'allocation_items', ['pocket_id'])

    # Investment side
    op.create_table(
        'investment_portfolios',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('money_book_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['money_book_id'], ['money_books.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_investment_portfolios_id', 'investment_portfolios', ['id'])
    op.create_index(
        'ix_investment_portfolios_money_book_id', 'investment_portfolios', ['money_book_id'], unique=True
    )

    op.create_table(
        'assets',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('portfolio_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('type', sa.Enum(*ASSET_TYPES, name='assettype'), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['portfolio_id'], ['investment_portfolios.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('portfolio_id', 'type', 'name', name='uq_portfolio_asset_type_name'),
    )
    op.create_index('ix_assets_id', 'assets', ['id'])
    op.create_index('ix_assets_portfolio_id', 'assets', ['portfolio_id'])

    op.create_table(
        'holdings',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('asset_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('platform', sa.String(length=255), nullable=False),
        sa.Column('instrument_name', sa.String(length=255), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('total_investment', sa.Numeric(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('total_quantity', sa.Numeric(precision=18, scale=6), nullable=False, server_default='0'),
        sa.Column('transaction_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_updated', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        *_timestamps(),
        sa.ForeignKeyConstraint(['asset_id'], ['assets.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('asset_id', 'platform', 'instrument_name', name='uq_asset_platform_instrument'),
    )
    op.create_index('ix_holdings_id', 'holdings', ['id'])
    op.create_index('ix_holdings_asset_id', 'holdings', ['asset_id'])

    op.create_table(
        'holding_transactions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('holding_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('transaction_type', sa.Enum(*TRANSACTION_TYPES, name='transactiontype'), nullable=False),
        sa.Column('amount', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('quantity', sa.Numeric(precision=18, scale=6), nullable=False),
        sa.Column('average_price', sa.Numeric(precision=18, scale=2), nullable=True),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('linked_allocation_id', postgresql.UUID(as_uuid=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['holding_id'], ['holdings.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['linked_allocation_id'], ['allocations.id'], ondelete='SET NULL'),
    )
    op.create_index('ix_holding_transactions_id', 'holding_transactions', ['id'])
    op.create_index('ix_holding_transactions_holding_id', 'holding_transactions', ['holding_id'])
    op.create_index(
        'ix_holding_transactions_linked_allocation_id', 'holding_transactions', ['linked_allocation_id']
    )

    op.create_table(
        'holding_budget_sources',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('holding_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('pocket_name', sa.String(length=255), nullable=False),
        sa.Column('pocket_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('accumulated_percentage', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('accumulated_amount', sa.Numeric(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('transaction_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_updated', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        *_timestamps(),
        sa.ForeignKeyConstraint(['holding_id'], ['holdings.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['pocket_id'], ['pockets.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('holding_id', 'pocket_name', name='uq_holding_pocket_name'),
    )
    op.create_index('ix_holding_budget_sources_id', 'holding_budget_sources', ['id'])
    op.create_index('ix_holding_budget_sources_holding_id', 'holding_budget_sources', ['holding_id'])


def downgrade() -> None:
    op.drop_table('holding_budget_sources')
    op.drop_table('holding_transactions')
    op.drop_table('holdings')
    op.drop_table('assets')
    op.drop_table('investment_portfolios')
    op.drop_table('allocation_items')
    op.drop_table('allocations')
    op.drop_table('pockets')
    op.drop_table('money_books')
    op.drop_table('users')
    sa.Enum(name='transactiontype').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='assettype').drop(op.get_bind(), checkfirst=True)
