"""
Resolved command and preview models.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from .settlement import SwapResult


@dataclass(frozen=True)
class SendCommand:
    to: str
    amount: int
    asset: str
    decimals: int


@dataclass(frozen=True)
class SwapCommand:
    amount_in: int
    min_amount_out: int
    asset_in: str
    asset_out: str


Command = Union[SendCommand, SwapCommand]


@dataclass(frozen=True)
class CommandPreview:
    """Everything needed to execute a command, without executing it."""
    command: Command
    to: str                 # Call target
    value: int              # Native amount attached
    data: bytes             # Call data for the target
    call_data: bytes        # execute(to, value, data) operation payload

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": "send" if isinstance(self.command, SendCommand) else "swap",
            "to": self.to,
            "value": str(self.value),
            "data": "0x" + self.data.hex(),
            "call_data": "0x" + self.call_data.hex(),
        }


@dataclass(frozen=True)
class CommandReceipt:
    command: Command
    swap: Optional[SwapResult] = None
