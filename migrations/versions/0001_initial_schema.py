"""initial schema

Accounts, debts, recurring payments, transactions and the
audit log.

Revision ID: 0001
Revises:
Create Date: 2024-01-15 00:00:00
"""

from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

# Stored values are the enum member names, as SQLAlchemy's Enum type writes them
ACCOUNT_TYPES = ("CURRENT", "SAVINGS", "INVESTMENT", "RETIREMENT", "CRYPTO")
RESET_FREQUENCIES = ("DAILY", "WEEKLY", "MONTHLY")
DEBT_TYPES = ("CREDIT_CARD", "LOAN", "CAR_PAYMENT", "MORTGAGE")
PAYMENT_FREQUENCIES = ("WEEKLY", "MONTHLY", "YEARLY")
TRANSACTION_TYPES = ("INCOME", "EXPENSE")


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "account_type",
            sa.Enum(*ACCOUNT_TYPES, name="account_type_enum", create_constraint=True),
            nullable=False,
        ),
        sa.Column("balance", sa.Numeric(12, 2), nullable=False),
        sa.Column("interest_rate", sa.Numeric(5, 2), nullable=True),
        sa.Column("api_key", sa.Text(), nullable=True),
        sa.Column("pie_id", sa.String(255), nullable=True),
        sa.Column("external_result", sa.Numeric(12, 2), nullable=True),
        sa.Column(
            "reset_frequency",
            sa.Enum(*RESET_FREQUENCIES, name="reset_frequency_enum", create_constraint=True),
            nullable=True,
        ),
        sa.Column("reset_day", sa.Integer(), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("version_id", sa.Integer(), nullable=False),
    )

    op.create_table(
        "debts",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "debt_type",
            sa.Enum(*DEBT_TYPES, name="debt_type_enum", create_constraint=True),
            nullable=False,
        ),
        sa.Column("balance", sa.Numeric(12, 2), nullable=False),
        sa.Column("apr", sa.Numeric(5, 2), nullable=False),
        sa.Column("minimum_payment", sa.Numeric(12, 2), nullable=False),
        sa.Column("credit_limit", sa.Numeric(12, 2), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("version_id", sa.Integer(), nullable=False),
    )

    op.create_table(
        "recurring_payments",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "frequency",
            sa.Enum(*PAYMENT_FREQUENCIES, name="payment_frequency_enum", create_constraint=True),
            nullable=False,
        ),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column(
            "payment_type",
            sa.Enum(*TRANSACTION_TYPES, name="payment_type_enum", create_constraint=True),
            nullable=False,
        ),
        sa.Column("next_payment_date", sa.Date(), nullable=False),
        sa.Column("anchor_day", sa.Integer(), nullable=False),
        sa.Column(
            "account_id",
            sa.String(50),
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("version_id", sa.Integer(), nullable=False),
    )
    op.create_index(
        "ix_recurring_payments_next_payment_date",
        "recurring_payments", ["next_payment_date"],
    )
    op.create_index(
        "ix_recurring_payments_account_id", "recurring_payments", ["account_id"]
    )

    op.create_table(
        "transactions",
        sa.Column("id", sa.String(50), primary_key=True),
        sa.Column(
            "account_id",
            sa.String(50),
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column(
            "transaction_type",
            sa.Enum(*TRANSACTION_TYPES, name="transaction_type_enum", create_constraint=True),
            nullable=False,
        ),
        sa.Column(
            "recurring_payment_id",
            sa.String(50),
            sa.ForeignKey("recurring_payments.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("transfer_id", sa.String(50), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("version_id", sa.Integer(), nullable=False),
        sa.UniqueConstraint(
            "transfer_id", "transaction_type", name="uq_transactions_transfer_leg"
        ),
    )
    op.create_index("ix_transactions_account_id", "transactions", ["account_id"])
    op.create_index(
        "ix_transactions_recurring_payment_id", "transactions", ["recurring_payment_id"]
    )
    op.create_index("ix_transactions_transfer_id", "transactions", ["transfer_id"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("entity_id", sa.String(50), nullable=False),
        sa.Column("details", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_audit_log_entity_id", "audit_log", ["entity_id"])


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("transactions")
    op.drop_table("recurring_payments")
    op.drop_table("debts")
    op.drop_table("accounts")
    for name in (
        "transaction_type_enum",
        "payment_type_enum",
        "payment_frequency_enum",
        "debt_type_enum",
        "reset_frequency_enum",
        "account_type_enum",
    ):
        sa.Enum(name=name).drop(op.get_bind(), checkfirst=True)
