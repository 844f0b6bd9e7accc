"""
Pydantic schemas for the chart of accounts.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from school_ledger.models.enums import AccountType


class AccountCreate(BaseModel):
    """Request to add an account to the chart of accounts."""
    code: str = Field(min_length=1, max_length=20)
    name: str = Field(min_length=1, max_length=100)
    account_type: AccountType
    parent_id: int | None = None
    is_active: bool = True


class AccountUpdate(BaseModel):
    """
    Partial update of an account.

    Only fields that were actually sent are applied, so
    parent_id=None in the body detaches the account from its
    parent while an absent parent_id leaves it alone. code and
    account_type can only change while no lines reference the
    account.
    """
    code: str | None = Field(default=None, min_length=1, max_length=20)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    account_type: AccountType | None = None
    parent_id: int | None = None
    is_active: bool | None = None


class AccountResponse(BaseModel):
    id: int
    code: str
    name: str
    account_type: AccountType
    parent_id: int | None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
