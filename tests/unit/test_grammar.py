"""
Tests for command normalization, action classification and positional matching.
"""

import pytest

from intent_engine.core.errors import InvalidSyntax
from intent_engine.core.grammar import (
    Action,
    SendClause,
    SwapClause,
    classify,
    match_send,
    match_swap,
    normalize,
    parse_clause,
)


def test_normalize_lowercases_and_splits():
    assert normalize("  Send 20   DAI to Vitalik ") == ["send", "20", "dai", "to", "vitalik"]


@pytest.mark.parametrize("word", ["send", "transfer", "pay", "grant"])
def test_send_synonyms(word):
    assert classify(f"{word} vitalik 1 eth") is Action.SEND


@pytest.mark.parametrize("word", ["swap", "exchange", "stake", "deposit", "unstake", "withdraw"])
def test_swap_synonyms(word):
    assert classify(f"{word} 1 eth to dai") is Action.SWAP


def test_unknown_action():
    with pytest.raises(InvalidSyntax):
        classify("borrow 1 eth from aave")


def test_empty_command():
    with pytest.raises(InvalidSyntax):
        parse_clause("   ")


class TestMatchSend:
    def test_four_word_form(self):
        clause = match_send(normalize("send vitalik 20 DAI"))
        assert clause == SendClause(action="send", recipient="vitalik", amount="20", asset="dai")

    @pytest.mark.parametrize("filler", ["to", "for"])
    def test_five_word_form_skips_filler(self, filler):
        clause = match_send(normalize(f"send 20 DAI {filler} vitalik"))
        assert (clause.recipient, clause.amount, clause.asset) == ("vitalik", "20", "dai")

    def test_filler_is_not_validated(self):
        clause = match_send(normalize("pay 1 eth banana bob"))
        assert clause.recipient == "bob"

    @pytest.mark.parametrize("text", ["send 1 eth", "send 1 eth to bob now"])
    def test_wrong_arity(self, text):
        with pytest.raises(InvalidSyntax):
            match_send(normalize(text))


class TestMatchSwap:
    def test_five_word_form_defaults_minimum(self):
        clause = match_swap(normalize("swap 1 ETH to DAI"))
        assert clause == SwapClause(action="swap", amount_in="1", asset_in="eth", min_amount_out="", asset_out="dai")

    def test_six_word_form_carries_minimum(self):
        clause = match_swap(normalize("swap 1 ETH to 2500 DAI"))
        assert clause.min_amount_out == "2500"
        assert clause.asset_out == "dai"

    @pytest.mark.parametrize("text", ["swap 1 eth", "swap 1 eth to 2500 dai please"])
    def test_wrong_arity(self, text):
        with pytest.raises(InvalidSyntax):
            match_swap(normalize(text))


def test_parse_clause_dispatches_on_action():
    assert isinstance(parse_clause("transfer 1 eth to bob"), SendClause)
    assert isinstance(parse_clause("exchange 1 eth for dai"), SwapClause)
    with pytest.raises(InvalidSyntax):
        parse_clause("send 1 eth")
