"""
Tests for the static and ENS name services.
"""

from unittest.mock import MagicMock

import pytest
from eth_utils import to_checksum_address

from intent_engine.core.codec import encode_address, selector
from intent_engine.core.constants import ZERO_ADDRESS
from intent_engine.core.errors import InvalidSyntax
from intent_engine.providers.names import ENS_REGISTRY, EnsNameService, StaticNameService, namehash
from intent_engine.providers.rpc import JsonRpcLedger

RESOLVER = to_checksum_address("0x" + "4e" * 20)
OWNER = to_checksum_address("0x" + "0a" * 20)
RECEIVER = to_checksum_address("0x" + "ec" * 20)


def test_namehash_known_values():
    assert namehash("") == b"\x00" * 32
    assert namehash("eth").hex() == "93cdeb708b7545dc668eb9280176169d1c33cfd8ed6f04690a0bcc88a93fc4ae"
    assert namehash("Vitalik.ETH") == namehash("vitalik.eth")


class TestStaticNameService:
    def test_whois(self):
        service = StaticNameService({"Bob": RECEIVER.lower()})
        record = service.whois("bob")
        assert record.owner == record.receiver == RECEIVER
        assert record.node == "0x" + namehash("bob").hex()

    def test_unknown(self):
        assert StaticNameService().whois("bob") is None

    def test_register(self):
        service = StaticNameService()
        service.register("carol", RECEIVER)
        assert service.whois("Carol").receiver == RECEIVER

    @pytest.mark.parametrize("account", ["nothex", "0x1234", RECEIVER + "ff"])
    def test_malformed_account_rejected(self, account):
        with pytest.raises(InvalidSyntax):
            StaticNameService({"bob": account})
        with pytest.raises(InvalidSyntax):
            StaticNameService().register("bob", account)


def _ens_ledger(resolver=RESOLVER, receiver=RECEIVER):
    ledger = MagicMock(spec=JsonRpcLedger)

    def eth_call(to, data):
        if data[:4] == selector("resolver(bytes32)"):
            return encode_address(resolver)
        if data[:4] == selector("addr(bytes32)"):
            assert to == resolver
            return encode_address(receiver)
        if data[:4] == selector("owner(bytes32)"):
            return encode_address(OWNER)
        raise AssertionError(f"unexpected call to {to}")

    ledger.eth_call.side_effect = eth_call
    return ledger


class TestEnsNameService:
    def test_bare_name_gets_eth_suffix(self):
        ledger = _ens_ledger()
        record = EnsNameService(ledger).whois("vitalik")

        assert record.owner == OWNER
        assert record.receiver == RECEIVER
        assert record.node == "0x" + namehash("vitalik.eth").hex()
        registry_call = ledger.eth_call.call_args_list[0]
        assert registry_call.args[0] == ENS_REGISTRY
        assert registry_call.args[1][4:] == namehash("vitalik.eth")

    def test_no_resolver(self):
        assert EnsNameService(_ens_ledger(resolver=ZERO_ADDRESS)).whois("nobody") is None

    def test_no_address_record(self):
        assert EnsNameService(_ens_ledger(receiver=ZERO_ADDRESS)).whois("parked.eth") is None
