"""Bank transaction value object."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class BankTransaction(BaseModel):
    """Value object representing a bank transaction coming from the bank."""

    booking_date: date = Field(..., description="When transaction was booked")
    value_date: date | None = Field(default=None, description="When money moved")
    amount: Decimal = Field(..., description="Signed amount, negative for debits")
    currency: str = Field(default="EUR", max_length=3)
    purpose: str = Field(default="", description="Transaction description")

    applicant_name: str | None = Field(default=None, max_length=255)
    applicant_iban: str | None = Field(default=None, max_length=34)
    applicant_bic: str | None = Field(default=None, max_length=11)

    bank_reference: str | None = Field(default=None, max_length=255)
    end_to_end_reference: str | None = Field(default=None, max_length=255)
    posting_text: str | None = Field(default=None, max_length=255)

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
    )

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> str:
        return str(value)

    def is_credit(self) -> bool:
        return self.amount > 0

    def is_debit(self) -> bool:
        return self.amount < 0

    def __str__(self) -> str:
        return (
            f"{self.booking_date.isoformat()} {self.amount} {self.currency} "
            f"{self.applicant_name or ''}".rstrip()
        )
