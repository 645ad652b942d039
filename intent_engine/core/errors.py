"""
Error taxonomy for the intents engine.

Every failure aborts the whole invocation. Nothing here is retried by the
engine itself; retry is a caller decision.
"""

from typing import Optional


class IntentError(Exception):
    """Base class for all engine failures."""

    code: str = "intent_error"
    default_message: str = "Intent could not be processed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class InvalidSyntax(IntentError):
    """Unknown action, wrong word count, malformed hex or account text."""

    code = "invalid_syntax"
    default_message = "Command does not match any known grammar"


class InvalidCharacter(IntentError):
    """Non-digit, non-point character (or a second point) in an amount."""

    code = "invalid_character"
    default_message = "Amount contains an invalid character"


class InvalidSelector(IntentError):
    """Decoded payload's nested call is not an asset transfer."""

    code = "invalid_selector"
    default_message = "Nested call is not an asset transfer"


class InsufficientSwap(IntentError):
    """Realized swap output is below the command's stated minimum."""

    code = "insufficient_swap"
    default_message = "Swap output below the requested minimum"


class InvalidSwap(IntentError):
    """Settlement reported no positive delta."""

    code = "invalid_swap"
    default_message = "Settlement produced no positive delta"


class Overflow(IntentError):
    """Input amount at or above the largest signed 256-bit magnitude."""

    code = "overflow"
    default_message = "Amount exceeds the representable bound"


class Unauthorized(IntentError):
    """Caller is not the governance principal, or not the expected venue."""

    code = "unauthorized"
    default_message = "Caller is not authorized"


class UnknownAsset(IntentError):
    """Asset name resolved to nothing in either alias table."""

    code = "unknown_asset"
    default_message = "Unknown asset"


class UnknownName(IntentError):
    """Recipient name could not be resolved to an account."""

    code = "unknown_name"
    default_message = "Name does not resolve to an account"


class NoRoute(IntentError):
    """No curated, governance or deployed pool exists for the pair."""

    code = "no_route"
    default_message = "No pool available for this pair"


class LedgerError(IntentError):
    """Failure reported by the ledger substrate."""

    code = "ledger_error"
    default_message = "Ledger call failed"


__all__ = [
    "IntentError",
    "InvalidSyntax",
    "InvalidCharacter",
    "InvalidSelector",
    "InsufficientSwap",
    "InvalidSwap",
    "Overflow",
    "Unauthorized",
    "UnknownAsset",
    "UnknownName",
    "NoRoute",
    "LedgerError",
]
