"""Governance guard and mutation notifications."""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Any, Callable, List, TypeVar

from eth_utils import is_hex_address, to_checksum_address

from .errors import Unauthorized

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class GovernanceEvent:
    event: str
    key: str
    value: str
    emitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "event": self.event,
            "key": self.key,
            "value": self.value,
            "emitted_at": self.emitted_at.isoformat(),
        }


class EventLog:
    """Append-only record of governance notifications."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._events: List[GovernanceEvent] = []

    def emit(self, event: str, key: str, value: str) -> GovernanceEvent:
        record = GovernanceEvent(event=event, key=key, value=value)
        with self._lock:
            self._events.append(record)
        logger.info("governance %s: %s -> %s", event, key, value)
        return record

    def all(self) -> List[GovernanceEvent]:
        with self._lock:
            return list(self._events)


def is_governance(caller: str, governance: str) -> bool:
    if not governance or not is_hex_address(caller):
        return False
    return to_checksum_address(caller) == to_checksum_address(governance)


def governance_only(method: F) -> F:
    """Reject the call unless its ``caller`` is the owner's governance principal.

    The decorated method must take ``caller`` as its first argument after
    ``self`` and the owner must expose a ``governance`` attribute.
    """

    @functools.wraps(method)
    def wrapper(self, caller: str, *args: Any, **kwargs: Any) -> Any:
        if not is_governance(caller, self.governance):
            logger.warning("rejected %s from %s", method.__name__, caller)
            raise Unauthorized(f"{caller} is not the governance principal")
        return method(self, caller, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


__all__ = [
    "GovernanceEvent",
    "EventLog",
    "is_governance",
    "governance_only",
]
