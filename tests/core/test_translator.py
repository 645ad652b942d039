"""
Tests for payload translation back to command text and for operation verification.
"""

import logging

import pytest
from eth_utils import to_checksum_address

from intent_engine.core.codec import encode_address, encode_execute, encode_uint, selector
from intent_engine.core.constants import DAI
from intent_engine.core.errors import InvalidSelector, InvalidSyntax, UnknownAsset
from intent_engine.core.translator import payloads_match

GOVERNANCE = to_checksum_address("0x" + "ab" * 20)
RECIPIENT = "0x1c0aa8ccd568d90d61659f060d1bfb1e6f855a20"
TOKEN_A = to_checksum_address("0x" + "11" * 20)


class TestTranslate:
    def test_native_send_round_trip(self, engine):
        intent = f"send 1 ETH to {RECIPIENT}"
        payload = engine.preview(intent).call_data
        assert engine.translate(payload).lower() == intent.lower()

    def test_fractional_native_send(self, engine):
        payload = engine.preview(f"send 0.25 eth to {RECIPIENT}").call_data
        assert engine.translate(payload) == f"send 0.25 ETH to {RECIPIENT}"

    def test_token_send_uses_builtin_symbol(self, engine):
        payload = engine.preview(f"send 20 dai to {RECIPIENT}").call_data
        assert engine.translate(payload) == f"send 20 DAI to {RECIPIENT}"

    def test_token_send_uses_governance_alias(self, engine, ledger):
        ledger.create_token(TOKEN_A, "ALP", "Alpha", 9)
        engine.set_name(GOVERNANCE, TOKEN_A, "Alpha")
        payload = engine.preview(f"send 1.5 alpha to {RECIPIENT}").call_data
        assert engine.translate(payload) == f"send 1.5 Alpha to {RECIPIENT}"

    def test_token_send_falls_back_to_live_metadata(self, engine, ledger):
        ledger.create_token(TOKEN_A, "ALP", "Alpha", 9)
        payload = engine.preview(f"send 1.5 {TOKEN_A} to {RECIPIENT}").call_data
        assert engine.translate(payload) == f"send 1.5 ALP to {RECIPIENT}"

    def test_value_with_call_data_reads_as_native_send(self, engine, caplog):
        transfer = engine.preview(f"send 20 dai to {RECIPIENT}").data
        payload = encode_execute(DAI, 10**18, transfer)

        with caplog.at_level(logging.WARNING, logger="intent_engine.core.translator"):
            assert engine.translate(payload) == f"send 1 ETH to {DAI.lower()}"
        assert "ignoring 68 bytes of nested call data" in caplog.text

    def test_non_transfer_selector(self, engine):
        approve = selector("approve(address,uint256)") + encode_address(RECIPIENT) + encode_uint(1)
        with pytest.raises(InvalidSelector):
            engine.translate(encode_execute(DAI, 0, approve))

    def test_zero_value_without_call(self, engine):
        with pytest.raises(InvalidSelector):
            engine.translate(encode_execute(DAI, 0, b""))

    def test_short_payload(self, engine):
        with pytest.raises(InvalidSyntax):
            engine.translate(b"\x00" * 67)


class TestVerify:
    @pytest.mark.parametrize(
        "intent",
        [
            f"send 1 ETH to {RECIPIENT}",
            "send vitalik 20 DAI",
            "swap 1 ETH to 2500 DAI",
        ],
    )
    def test_own_payload_verifies(self, engine, intent):
        assert engine.verify(intent, engine.preview(intent).call_data)

    def test_any_single_byte_mutation_fails(self, engine):
        intent = "send 20 DAI to vitalik"
        payload = engine.preview(intent).call_data
        for index in range(len(payload)):
            mutated = bytearray(payload)
            mutated[index] ^= 0x01
            assert not engine.verify(intent, bytes(mutated))

    def test_extra_padding_fails(self, engine):
        intent = "send 20 DAI to vitalik"
        payload = engine.preview(intent).call_data
        assert not engine.verify(intent, payload + b"\x00")

    def test_different_amount_fails(self, engine):
        payload = engine.preview("send 20 DAI to vitalik").call_data
        assert not engine.verify("send 21 DAI to vitalik", payload)

    def test_unparseable_intent_propagates(self, engine):
        with pytest.raises(UnknownAsset):
            engine.verify("send 20 doge to vitalik", b"")


def test_payloads_match():
    assert payloads_match(b"\x01\x02", b"\x01\x02")
    assert not payloads_match(b"\x01\x02", b"\x01\x03")
    assert not payloads_match(b"\x01", b"\x01\x00")
