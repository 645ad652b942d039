"""
Tests for the engine facade: parsing, previews, command execution, governance and queries.
"""

from decimal import Decimal

import pytest
from eth_utils import to_checksum_address

from intent_engine.config import Settings
from intent_engine.core.codec import decode_execute, decode_transfer, encode_swap, encode_transfer
from intent_engine.core.constants import DAI, NATIVE_PLACEHOLDER, USDC
from intent_engine.core.engine import build_engine, default_engine_address
from intent_engine.core.errors import (
    InvalidCharacter,
    InvalidSyntax,
    LedgerError,
    Unauthorized,
    UnknownAsset,
    UnknownName,
)
from intent_engine.core.models import SendCommand, SwapCommand
from intent_engine.providers.names import EnsNameService, StaticNameService
from intent_engine.providers.rpc import JsonRpcLedger
from intent_engine.providers.simulated import SimulatedLedger

ETHER = 10**18
GOVERNANCE = to_checksum_address("0x" + "ab" * 20)
ALICE = to_checksum_address("0x" + "a1" * 20)
VITALIK = to_checksum_address("0xd8da6bf26964af9d7eed9e03e53415d37aa96045")
RECIPIENT = "0x1c0aa8ccd568d90d61659f060d1bfb1e6f855a20"

TOKEN_A = to_checksum_address("0x" + "11" * 20)
STRANGER = to_checksum_address("0x" + "5e" * 20)


class TestParse:
    def test_send_to_name(self, engine):
        command = engine.parse("send vitalik 20 DAI")
        assert command == SendCommand(to=VITALIK, amount=20 * ETHER, asset=DAI, decimals=18)

    def test_swap_without_minimum(self, engine):
        command = engine.parse("swap 1 ETH to DAI")
        assert command == SwapCommand(amount_in=ETHER, min_amount_out=0, asset_in=NATIVE_PLACEHOLDER, asset_out=DAI)

    def test_swap_with_minimum(self, engine):
        assert engine.parse("swap 1 ETH to 2500 DAI").min_amount_out == 2_500 * ETHER

    def test_minimum_uses_output_decimals(self, engine):
        assert engine.parse("swap 1 eth for 2500.5 usdc").min_amount_out == 2_500_500_000

    def test_three_words(self, engine):
        with pytest.raises(InvalidSyntax):
            engine.parse("send 1 eth")

    def test_bad_amount(self, engine):
        with pytest.raises(InvalidCharacter):
            engine.parse("send vitalik 12a.5 DAI")

    def test_unknown_asset(self, engine):
        with pytest.raises(UnknownAsset):
            engine.parse("send vitalik 1 doge")

    def test_unknown_name(self, engine):
        with pytest.raises(UnknownName):
            engine.parse("send nobody 1 eth")

    def test_hex_recipient(self, engine):
        assert engine.parse(f"send 1 eth to {RECIPIENT}").to == to_checksum_address(RECIPIENT)


class TestPreview:
    def test_native_send(self, engine):
        preview = engine.preview(f"send 1 ETH to {RECIPIENT}")
        assert preview.to == to_checksum_address(RECIPIENT)
        assert preview.value == ETHER
        assert preview.data == b""
        call = decode_execute(preview.call_data)
        assert (call.to, call.value, call.data) == (preview.to, ETHER, b"")

    def test_token_send(self, engine):
        preview = engine.preview("send 100 usdc to vitalik")
        assert preview.to == USDC
        assert preview.value == 0
        assert preview.data == encode_transfer(VITALIK, 100_000_000)
        transfer = decode_transfer(decode_execute(preview.call_data).data)
        assert (transfer.recipient, transfer.amount) == (VITALIK, 100_000_000)

    def test_swap_targets_engine(self, engine):
        preview = engine.preview("swap 1 ETH to 2500 DAI")
        assert preview.to == engine.address
        assert preview.value == ETHER
        assert preview.data == encode_swap(NATIVE_PLACEHOLDER, DAI, ETHER, 2_500 * ETHER)

    def test_token_swap_attaches_no_value(self, engine):
        assert engine.preview("swap 100 usdc to dai").value == 0

    def test_overlong_recipient_is_not_truncated(self, engine):
        with pytest.raises(InvalidSyntax):
            engine.preview(f"send 1 eth to {RECIPIENT}ff")

    def test_to_dict(self, engine):
        data = engine.preview(f"send 1 ETH to {RECIPIENT}").to_dict()
        assert data["kind"] == "send"
        assert data["value"] == str(ETHER)
        assert data["data"] == "0x"
        assert data["call_data"].startswith("0xb61d27f6")


class TestCommand:
    def test_native_send(self, engine, ledger):
        ledger.fund(ALICE, 2 * ETHER)
        engine.command(ALICE, "send vitalik 1.5 eth")
        assert ledger.native_balance(VITALIK) == 3 * ETHER // 2
        assert ledger.native_balance(ALICE) == ETHER // 2

    def test_token_send_pulls_with_allowance(self, engine, ledger):
        ledger.mint(DAI, ALICE, 50 * ETHER)
        ledger.approve(DAI, ALICE, engine.address, 20 * ETHER)
        receipt = engine.command(ALICE, "send 20 DAI to vitalik")
        assert receipt.swap is None
        assert ledger.balance_of(DAI, VITALIK) == 20 * ETHER
        assert ledger.balance_of(DAI, ALICE) == 30 * ETHER

    def test_insufficient_native_balance(self, engine, ledger):
        with pytest.raises(LedgerError):
            engine.command(ALICE, "send vitalik 1 eth")
        assert ledger.native_balance(VITALIK) == 0


class TestGovernance:
    def test_set_name_requires_governance(self, engine, ledger):
        ledger.create_token(TOKEN_A, "ALP", "Alpha", 9)
        with pytest.raises(Unauthorized):
            engine.set_name(STRANGER, TOKEN_A, "alpha")
        assert engine.assets.resolve("alpha") is None
        assert engine.events.all() == []

    def test_set_name_registers_and_emits(self, engine, ledger):
        ledger.create_token(TOKEN_A, "ALP", "Alpha", 9)
        engine.set_name(GOVERNANCE.lower(), TOKEN_A, "Alpha")

        assert engine.parse("send vitalik 2 alpha").amount == 2 * 10**9
        event = engine.events.all()[-1]
        assert (event.event, event.key, event.value) == ("NameSet", "alpha", TOKEN_A)

    def test_set_names_reads_metadata(self, engine, ledger):
        ledger.create_token(TOKEN_A, "ALP", "Alpha", 9)
        registered = engine.set_names(GOVERNANCE, [TOKEN_A])

        assert registered == ["alpha", "alp"]
        assert engine.assets.resolve("alp").address == TOKEN_A
        assert [event.event for event in engine.events.all()] == ["NameSet", "NameSet"]

    def test_set_pair_emits_canonical_key(self, engine):
        pool = to_checksum_address("0x" + "99" * 20)
        engine.set_pair(GOVERNANCE, STRANGER, TOKEN_A, pool)
        event = engine.events.all()[-1]
        assert event.event == "PairSet"
        assert event.key == f"{TOKEN_A}/{STRANGER}"
        assert event.value == pool

    def test_set_pair_requires_governance(self, engine):
        with pytest.raises(Unauthorized):
            engine.set_pair(STRANGER, STRANGER, TOKEN_A, "0x" + "99" * 20)

    def test_set_name_service(self, engine):
        replacement = StaticNameService({"carol": STRANGER})
        engine.set_name_service(GOVERNANCE, replacement)

        assert engine.parse("send carol 1 eth").to == STRANGER
        assert engine.events.all()[-1].value == "static"
        with pytest.raises(UnknownName):
            engine.parse("send vitalik 1 eth")

    def test_non_address_caller(self, engine):
        with pytest.raises(Unauthorized):
            engine.set_name_service("governance", StaticNameService())


class TestQueries:
    def test_address_of(self, engine):
        record = engine.what_is_the_address_of("Vitalik")
        assert record.owner == record.receiver == VITALIK
        assert record.node.startswith("0x")

    def test_address_of_unknown(self, engine):
        with pytest.raises(UnknownName):
            engine.what_is_the_address_of("nobody")

    def test_token_balance(self, engine, ledger):
        ledger.mint(USDC, VITALIK, 1_250_000)
        assert engine.what_is_the_balance_of("vitalik", "usdc") == (1_250_000, Decimal("1.25"))

    def test_native_balance(self, engine, ledger):
        ledger.fund(VITALIK, 3 * ETHER)
        assert engine.what_is_the_balance_of("vitalik", "eth") == (3 * ETHER, Decimal(3))

    def test_total_supply(self, engine, ledger):
        ledger.mint(DAI, VITALIK, 7 * ETHER)
        ledger.mint(DAI, ALICE, 3 * ETHER)
        assert engine.what_is_the_total_supply_of("dai") == (10 * ETHER, Decimal(10))

    def test_native_has_no_supply(self, engine):
        with pytest.raises(UnknownAsset):
            engine.what_is_the_total_supply_of("eth")


class TestBuildEngine:
    def test_simulated_by_default(self):
        engine = build_engine(Settings(rpc_url="", static_names={"bob": STRANGER}))
        assert isinstance(engine.ledger, SimulatedLedger)
        assert isinstance(engine.name_service, StaticNameService)
        assert engine.address == default_engine_address()
        assert engine.parse("send bob 1 eth").to == STRANGER

    def test_rpc_with_ens(self):
        engine = build_engine(Settings(rpc_url="http://localhost:8545", name_service="ENS", engine_address=STRANGER))
        try:
            assert isinstance(engine.ledger, JsonRpcLedger)
            assert isinstance(engine.name_service, EnsNameService)
            assert engine.address == STRANGER
        finally:
            engine.ledger.close()

    def test_ens_needs_a_node(self):
        engine = build_engine(Settings(rpc_url="", name_service="ens"))
        assert isinstance(engine.name_service, StaticNameService)
