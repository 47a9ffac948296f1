"""Results returned by the banking protocol client."""

from dataclasses import dataclass
from typing import Any, Optional

from bankster.domain.banking.value_objects.tan_challenge import TANChallenge


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a login dialog.

    ``pending`` is the client's opaque handle of the operation waiting for
    the TAN; it is only set when ``needs_challenge`` is True.
    """

    needs_challenge: bool
    challenge: Optional[TANChallenge] = None
    pending: Any = None


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a business operation (account list, statement)."""

    needs_challenge: bool = False
    challenge: Optional[TANChallenge] = None
    data: Any = None
    pending: Any = None
