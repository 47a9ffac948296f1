"""Configuration of one FinTS account as entered by the user."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from bankster.domain.banking.value_objects.bank_credentials import BankCredentials


class BankAccountConfig(BaseModel):
    """Account identity plus everything needed to reach the bank."""

    account: str = Field(..., min_length=1, description="Account identifier")
    credentials: BankCredentials
    ident: Optional[str] = Field(
        default=None,
        description="Account number or IBAN fragment if the login sees several",
    )

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @classmethod
    def from_backend_config(
        cls,
        account: str,
        config: dict[str, Any],
    ) -> "BankAccountConfig":
        """Build from the stored backend configuration (url/code/user/pass)."""
        return cls(
            account=account,
            credentials=BankCredentials.from_plain(
                blz=config.get("code") or "",
                username=config["user"],
                pin=config["pass"],
                endpoint=config["url"],
            ),
            ident=config.get("ident") or None,
        )

    @property
    def blz(self) -> str:
        return self.credentials.blz
