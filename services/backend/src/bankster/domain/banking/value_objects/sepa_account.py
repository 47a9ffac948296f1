"""SEPA account value object."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SepaAccount(BaseModel):
    """An account at the bank as reported by the SEPA account list."""

    iban: str = Field(..., min_length=1)
    bic: Optional[str] = Field(default=None)
    account_number: str = Field(default="")
    subaccount: Optional[str] = Field(default=None)
    blz: str = Field(default="")

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    def matches(self, ident: str) -> bool:
        """Check an account number or IBAN fragment against this account."""
        return ident in self.account_number or ident in self.iban

    def __str__(self) -> str:
        return self.iban
