"""
Pydantic schemas for the currency registry.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class CurrencyCreate(BaseModel):
    """Request to register a currency."""
    code: str = Field(min_length=3, max_length=3)
    name: str = Field(min_length=1, max_length=100)
    symbol: str | None = Field(default=None, max_length=10)
    is_base: bool = False

    @field_validator("code")
    @classmethod
    def code_upper(cls, v: str) -> str:
        return v.upper()


class CurrencyResponse(BaseModel):
    id: int
    code: str
    name: str
    symbol: str | None
    is_base: bool
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
