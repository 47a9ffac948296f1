"""TAN Challenge value object."""

from pydantic import BaseModel, ConfigDict, Field


class TANChallenge(BaseModel):
    """TAN Challenge from the Bank.

    Transient: produced by the protocol client when an operation needs a
    human response, shown by the setup wizard and never persisted.
    """

    challenge_text: str = Field(
        default="",
        description="Human-readable text what auth is for",
    )
    tan_medium_name: str | None = Field(default=None, description="e.g. 'Mein Handy'")
    is_decoupled: bool = Field(default=False, description="Approve in banking app")

    # Optional structured challenge data depending on TAN method
    hhduc_code: str | None = Field(default=None, description="optical TAN generators")
    matrix_code: tuple[str, bytes] | None = Field(
        default=None,
        description="For photo TAN (mime type, image data)",
    )

    reference: str = Field(default="", description="Transaction reference number")

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
    )

    def __str__(self) -> str:
        parts = [f"TAN Challenge: {self.challenge_text or '(no text)'}"]

        if self.tan_medium_name:
            parts.append(f"Medium: {self.tan_medium_name}")

        if self.hhduc_code:
            parts.append(f"HHD_UC Code: {self.hhduc_code}")

        if self.matrix_code:
            parts.append("Matrix code available for photo TAN")

        return "\n".join(parts)
