"""
Command grammar: normalization, action classification and positional matching.

Two intents are understood, each with exactly two word-count shapes::

    send:  [action][object][value][asset]
           [action][value][asset][filler][object]
    swap:  [action][value][asset][filler][object]
           [action][value][asset][filler][minOutputValue][object]

Arity alone picks the shape; filler words ("to", "for", ...) are skipped
positionally and never validated.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Union

from .constants import SEND_ACTIONS, SWAP_ACTIONS
from .errors import InvalidSyntax


class Action(str, Enum):
    SEND = "send"
    SWAP = "swap"


ACTION_SYNONYMS: Mapping[str, Action] = MappingProxyType({
    **{word: Action.SEND for word in SEND_ACTIONS},
    **{word: Action.SWAP for word in SWAP_ACTIONS},
})


@dataclass(frozen=True)
class SendClause:
    action: str
    recipient: str
    amount: str
    asset: str


@dataclass(frozen=True)
class SwapClause:
    action: str
    amount_in: str
    asset_in: str
    min_amount_out: str
    asset_out: str


Clause = Union[SendClause, SwapClause]


def normalize(text: str) -> List[str]:
    """Lowercase ``text`` and split it into whitespace-delimited words."""

    return text.lower().split()


def classify(text: str) -> Action:
    words = normalize(text)
    if not words:
        raise InvalidSyntax("Empty command")
    return classify_action(words[0])


def classify_action(word: str) -> Action:
    action = ACTION_SYNONYMS.get(word)
    if action is None:
        raise InvalidSyntax(f"Unknown action {word!r}")
    return action


def match_send(words: List[str]) -> SendClause:
    if len(words) == 4:
        return SendClause(action=words[0], recipient=words[1], amount=words[2], asset=words[3])
    if len(words) == 5:
        return SendClause(action=words[0], amount=words[1], asset=words[2], recipient=words[4])
    raise InvalidSyntax(f"Send expects 4 or 5 words, got {len(words)}")


def match_swap(words: List[str]) -> SwapClause:
    if len(words) == 5:
        return SwapClause(
            action=words[0],
            amount_in=words[1],
            asset_in=words[2],
            min_amount_out="",
            asset_out=words[4],
        )
    if len(words) == 6:
        return SwapClause(
            action=words[0],
            amount_in=words[1],
            asset_in=words[2],
            min_amount_out=words[4],
            asset_out=words[5],
        )
    raise InvalidSyntax(f"Swap expects 5 or 6 words, got {len(words)}")


def parse_clause(text: str) -> Clause:
    """Normalize, classify and match ``text`` in one step."""

    words = normalize(text)
    if not words:
        raise InvalidSyntax("Empty command")
    if classify_action(words[0]) is Action.SEND:
        return match_send(words)
    return match_swap(words)


__all__ = [
    "Action",
    "ACTION_SYNONYMS",
    "SendClause",
    "SwapClause",
    "Clause",
    "normalize",
    "classify",
    "classify_action",
    "match_send",
    "match_swap",
    "parse_clause",
]
