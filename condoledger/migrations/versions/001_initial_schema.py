"""Create owners, ledger and payment tables.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create ledger and payment tables."""
    # Create owners table
    op.create_table(
        'owners',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('name', sa.String(255), nullable=False, comment='Full name of the owner'),
        sa.Column('email', sa.String(255), nullable=True, comment='Contact email'),
        sa.Column('phone', sa.String(50), nullable=True, comment='Contact phone number'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_owner_name', 'owners', ['name'])

    # Create ledger_accounts table
    op.create_table(
        'ledger_accounts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False, comment='Owner of the account (1:1)'),
        sa.Column('initial_balance', sa.Numeric(precision=14, scale=2), nullable=False, comment='Balance the account was opened with'),
        sa.Column('current_balance', sa.Numeric(precision=14, scale=2), nullable=False, comment='Running balance maintained by postings'),
        sa.ForeignKeyConstraint(['owner_id'], ['owners.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_ledger_accounts_owner_id', 'ledger_accounts', ['owner_id'], unique=True)

    # Create postings table
    op.create_table(
        'postings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('account_id', sa.Integer(), nullable=False, comment='Ledger account the posting belongs to'),
        sa.Column('kind', sa.Enum('CREDIT', 'DEBIT', name='postingkind', native_enum=False, length=10), nullable=False, comment='CREDIT or DEBIT'),
        sa.Column('amount', sa.Numeric(precision=14, scale=2), nullable=False, comment='Magnitude of the posting'),
        sa.Column('description', sa.String(500), nullable=True, comment='Free-text description'),
        sa.Column('occurred_at', sa.DateTime(timezone=True), nullable=False, comment='When the movement happened'),
        sa.ForeignKeyConstraint(['account_id'], ['ledger_accounts.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_postings_account_id', 'postings', ['account_id'])
    op.create_index('idx_posting_account_occurred', 'postings', ['account_id', 'occurred_at'])

    # Create payments table
    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('amount', sa.Numeric(precision=14, scale=2), nullable=False, comment='Amount due'),
        sa.Column('description', sa.String(500), nullable=True, comment='What the payment is for'),
        sa.Column('state', sa.Enum('PENDING', 'PAID', 'CANCELLED', name='paymentstate', native_enum=False, length=20), nullable=False, comment='PENDING, PAID or CANCELLED'),
        sa.Column('issued_at', sa.DateTime(timezone=True), nullable=False, comment='When the payment was issued'),
        sa.Column('due_at', sa.DateTime(timezone=True), nullable=True, comment='Due date, if any'),
        sa.Column('active', sa.Boolean(), nullable=False, comment='False once the payment has been deactivated'),
        sa.Column('owner_id', sa.Integer(), nullable=True, comment='Owner the payment is billed to'),
        sa.Column('fraction_id', sa.Integer(), nullable=True, comment='Fraction (unit) the payment refers to'),
        sa.Column('tenant_id', sa.Integer(), nullable=True, comment='Tenant the payment refers to'),
        sa.Column('user_id', sa.Integer(), nullable=True, comment='User who registered the payment'),
        sa.ForeignKeyConstraint(['owner_id'], ['owners.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_payments_owner_id', 'payments', ['owner_id'])
    op.create_index('ix_payments_fraction_id', 'payments', ['fraction_id'])
    op.create_index('ix_payments_tenant_id', 'payments', ['tenant_id'])
    op.create_index('idx_payment_active_issued', 'payments', ['active', 'issued_at'])
    op.create_index('idx_payment_state', 'payments', ['state'])

    # Create payment_audit_entries table
    op.create_table(
        'payment_audit_entries',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('payment_id', sa.Integer(), nullable=False),
        sa.Column('action', sa.Enum('CREATE', 'EDIT', 'DEACTIVATE', name='auditaction', native_enum=False, length=20), nullable=False),
        sa.Column('detail', sa.Text(), nullable=False),
        sa.Column('acting_user_id', sa.Integer(), nullable=True),
        sa.Column('recorded_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['payment_id'], ['payments.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_payment_audit_entries_payment_id', 'payment_audit_entries', ['payment_id'])
    op.create_index('idx_audit_payment_recorded', 'payment_audit_entries', ['payment_id', 'recorded_at'])


def downgrade() -> None:
    """Drop ledger and payment tables."""
    op.drop_table('payment_audit_entries')
    op.drop_table('payments')
    op.drop_table('postings')
    op.drop_table('ledger_accounts')
    op.drop_table('owners')
