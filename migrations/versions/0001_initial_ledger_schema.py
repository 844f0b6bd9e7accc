"""initial ledger schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

account_type_enum = sa.Enum(
    "ASSET", "LIABILITY", "EQUITY", "INCOME", "EXPENSE",
    name="account_type_enum",
)


def upgrade() -> None:
    op.create_table(
        "currencies",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=3), nullable=False, unique=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("symbol", sa.String(length=10), nullable=True),
        sa.Column("is_base", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "chart_of_accounts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=20), nullable=False, unique=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("account_type", account_type_enum, nullable=False),
        sa.Column(
            "parent_id", sa.Integer(),
            sa.ForeignKey("chart_of_accounts.id"), nullable=True,
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_chart_of_accounts_name", "chart_of_accounts", ["name"])
    op.create_index("ix_chart_of_accounts_parent_id", "chart_of_accounts", ["parent_id"])

    op.create_table(
        "journal_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("reference", sa.String(length=100), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("journal_id", sa.Integer(), nullable=True),
        sa.Column("created_by", sa.Integer(), nullable=True),
        sa.Column(
            "reverses_entry_id", sa.Integer(),
            sa.ForeignKey("journal_entries.id"), nullable=True, unique=True,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_journal_entries_reference", "journal_entries", ["reference"], unique=True
    )

    op.create_table(
        "journal_entry_lines",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "journal_entry_id", sa.Integer(),
            sa.ForeignKey("journal_entries.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column(
            "account_id", sa.Integer(),
            sa.ForeignKey("chart_of_accounts.id"), nullable=False,
        ),
        sa.Column(
            "currency_id", sa.Integer(),
            sa.ForeignKey("currencies.id"), nullable=False,
        ),
        sa.Column("debit", sa.Numeric(19, 2), nullable=False),
        sa.Column("credit", sa.Numeric(19, 2), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
    )
    op.create_index(
        "ix_journal_entry_lines_journal_entry_id", "journal_entry_lines", ["journal_entry_id"]
    )
    op.create_index("ix_journal_entry_lines_account_id", "journal_entry_lines", ["account_id"])
    op.create_index("ix_journal_entry_lines_currency_id", "journal_entry_lines", ["currency_id"])

    op.create_table(
        "account_balances",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "account_id", sa.Integer(),
            sa.ForeignKey("chart_of_accounts.id"), nullable=False,
        ),
        sa.Column(
            "currency_id", sa.Integer(),
            sa.ForeignKey("currencies.id"), nullable=False,
        ),
        sa.Column("balance", sa.Numeric(19, 2), nullable=False),
        sa.Column("as_of_date", sa.Date(), nullable=False),
        sa.UniqueConstraint(
            "account_id", "currency_id", name="uq_account_balance_account_currency"
        ),
    )
    op.create_index("ix_account_balances_account_id", "account_balances", ["account_id"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("event_type", sa.String(length=100), nullable=False),
        sa.Column("details", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("account_balances")
    op.drop_table("journal_entry_lines")
    op.drop_table("journal_entries")
    op.drop_table("chart_of_accounts")
    op.drop_table("currencies")
    account_type_enum.drop(op.get_bind(), checkfirst=True)
