"""
Intents engine facade.

Turns command text into call payloads (``preview``), executes commands against
a ledger (``command``), renders transfer payloads back into text
(``translate``) and proves a payload matches its intent (``verify``).
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from eth_utils import keccak, to_checksum_address

from ..config import Settings, settings
from ..providers.base import Ledger, NameRecord, NameService
from .amounts import format_units, parse_address, parse_amount
from .assets import AliasRegistry, AssetInfo, AssetResolver, is_native
from .codec import encode_execute, encode_swap, encode_transfer
from .errors import UnknownAsset, UnknownName
from .governance import EventLog, governance_only
from .grammar import SendClause, parse_clause
from .models import Command, CommandPreview, CommandReceipt, SendCommand, SwapCommand
from .routing import PoolRouteTable, PoolRouter
from .settlement import SwapResult, SwapSettlement, ensure_representable
from .translator import Translator, payloads_match

logger = logging.getLogger(__name__)


def default_engine_address() -> str:
    """Deterministic local account used when no deployed engine is configured."""
    return to_checksum_address(keccak(text="intent-engine")[12:])


class IntentsEngine:
    def __init__(
        self,
        ledger: Ledger,
        name_service: NameService,
        *,
        address: str,
        governance: str,
        factory: str,
        init_code_hash: str,
        wrapped_native: str,
    ):
        self.ledger = ledger
        self.name_service = name_service
        self.address = to_checksum_address(address)
        self.governance = governance
        self.aliases = AliasRegistry()
        self.routes = PoolRouteTable()
        self.events = EventLog()
        self.assets = AssetResolver(self.aliases, ledger)
        self.router = PoolRouter(ledger, self.routes, factory, init_code_hash)
        self.settlement = SwapSettlement(ledger, self.router, self.address, wrapped_native)
        self.translator = Translator(self.assets)

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def resolve_asset(self, name: str) -> AssetInfo:
        asset = self.assets.resolve(name)
        if asset is None:
            raise UnknownAsset(f"Unknown asset {name!r}")
        return asset

    def resolve_account(self, word: str) -> str:
        if word.startswith("0x"):
            return parse_address(word)
        record = self.name_service.whois(word)
        if record is None:
            raise UnknownName(f"{word!r} does not resolve to an account")
        return record.receiver

    def parse(self, intent: str) -> Command:
        clause = parse_clause(intent)
        if isinstance(clause, SendClause):
            asset = self.resolve_asset(clause.asset)
            return SendCommand(
                to=self.resolve_account(clause.recipient),
                amount=parse_amount(clause.amount, asset.decimals),
                asset=asset.address,
                decimals=asset.decimals,
            )
        asset_in = self.resolve_asset(clause.asset_in)
        asset_out = self.resolve_asset(clause.asset_out)
        return SwapCommand(
            amount_in=parse_amount(clause.amount_in, asset_in.decimals),
            min_amount_out=parse_amount(clause.min_amount_out, asset_out.decimals),
            asset_in=asset_in.address,
            asset_out=asset_out.address,
        )

    # ------------------------------------------------------------------
    # Forward path
    # ------------------------------------------------------------------

    def preview(self, intent: str) -> CommandPreview:
        command = self.parse(intent)
        if isinstance(command, SendCommand):
            if is_native(command.asset):
                to, value, data = command.to, command.amount, b""
            else:
                to, value, data = command.asset, 0, encode_transfer(command.to, command.amount)
        else:
            to = self.address
            value = command.amount_in if is_native(command.asset_in) else 0
            data = encode_swap(command.asset_in, command.asset_out, command.amount_in, command.min_amount_out)
        return CommandPreview(
            command=command,
            to=to,
            value=value,
            data=data,
            call_data=encode_execute(to, value, data),
        )

    def command(self, sender: str, intent: str) -> CommandReceipt:
        """Execute ``intent`` for ``sender``; every effect rolls back on failure."""

        sender = to_checksum_address(sender)
        command = self.parse(intent)
        logger.info("executing %s for %s", type(command).__name__, sender)
        with self.ledger.atomic():
            if isinstance(command, SendCommand):
                if is_native(command.asset):
                    self.ledger.transfer_native(sender, command.to, command.amount)
                else:
                    self.ledger.transfer_from(command.asset, self.address, sender, command.to, command.amount)
                return CommandReceipt(command=command)
            result = self._swap(sender, command)
        return CommandReceipt(command=command, swap=result)

    def swap(
        self,
        sender: str,
        asset_in: str,
        asset_out: str,
        amount_in: int,
        min_amount_out: int = 0,
    ) -> SwapResult:
        """Structured swap entrypoint, the target of previewed swap payloads."""

        command = SwapCommand(
            amount_in=amount_in,
            min_amount_out=min_amount_out,
            asset_in=to_checksum_address(asset_in),
            asset_out=to_checksum_address(asset_out),
        )
        with self.ledger.atomic():
            return self._swap(to_checksum_address(sender), command)

    def _swap(self, sender: str, command: SwapCommand) -> SwapResult:
        ensure_representable(command.amount_in)
        context = self.settlement.build_context(
            sender,
            command.asset_in,
            command.asset_out,
            command.amount_in,
            command.min_amount_out,
        )
        if context.native_in:
            # Stands in for the native value attached to the call
            self.ledger.transfer_native(sender, self.address, command.amount_in)
        return self.settlement.swap(context)

    # ------------------------------------------------------------------
    # Inverse path
    # ------------------------------------------------------------------

    def translate(self, payload: bytes) -> str:
        return self.translator.translate(payload)

    def verify(self, intent: str, payload: bytes) -> bool:
        expected = self.preview(intent).call_data
        matched = payloads_match(expected, payload)
        logger.info("operation %s intent %r", "matches" if matched else "does not match", intent)
        return matched

    # ------------------------------------------------------------------
    # Governance
    # ------------------------------------------------------------------

    @governance_only
    def set_name(self, caller: str, asset: str, name: str) -> None:
        key, address = self.aliases.register(asset, name)
        self.events.emit("NameSet", key, address)

    @governance_only
    def set_names(self, caller: str, assets: Iterable[str]) -> List[str]:
        """Register each asset's self-reported name and symbol as aliases."""

        registered = []
        for asset in assets:
            for alias in (self.ledger.token_name(asset), self.ledger.symbol(asset)):
                key, address = self.aliases.register(asset, alias.lower())
                self.events.emit("NameSet", key, address)
                registered.append(key)
        return registered

    @governance_only
    def set_pair(self, caller: str, token_a: str, token_b: str, pool: str) -> None:
        token0, token1, pool = self.routes.set(token_a, token_b, pool)
        self.events.emit("PairSet", f"{token0}/{token1}", pool)

    @governance_only
    def set_name_service(self, caller: str, name_service: NameService) -> None:
        self.name_service = name_service
        self.events.emit("NameServiceSet", "name_service", name_service.name)

    # ------------------------------------------------------------------
    # Read-only queries
    # ------------------------------------------------------------------

    def what_is_the_address_of(self, name: str) -> NameRecord:
        record = self.name_service.whois(name.lower())
        if record is None:
            raise UnknownName(f"{name!r} does not resolve to an account")
        return record

    def what_is_the_balance_of(self, name: str, asset: str) -> Tuple[int, Decimal]:
        account = self.resolve_account(name.lower())
        info = self.resolve_asset(asset)
        if info.is_native:
            balance = self.ledger.native_balance(account)
        else:
            balance = self.ledger.balance_of(info.address, account)
        return balance, Decimal(format_units(balance, info.decimals))

    def what_is_the_total_supply_of(self, asset: str) -> Tuple[int, Decimal]:
        info = self.resolve_asset(asset)
        if info.is_native:
            raise UnknownAsset("Native asset has no token supply")
        supply = self.ledger.total_supply(info.address)
        return supply, Decimal(format_units(supply, info.decimals))


def build_engine(config: Optional[Settings] = None) -> IntentsEngine:
    """Wire an engine from settings: JSON-RPC ledger when configured, else simulated."""

    from ..providers.names import EnsNameService, StaticNameService
    from ..providers.rpc import JsonRpcLedger
    from ..providers.simulated import SimulatedLedger

    config = config or settings
    if config.has_rpc():
        ledger: Ledger = JsonRpcLedger(config.rpc_url, timeout_s=config.rpc_timeout_seconds)
    else:
        ledger = SimulatedLedger(wrapped_native=config.wrapped_native_address)

    if config.name_service == "ens" and isinstance(ledger, JsonRpcLedger):
        name_service: NameService = EnsNameService(ledger)
    else:
        name_service = StaticNameService(config.static_names)

    return IntentsEngine(
        ledger,
        name_service,
        address=config.engine_address or default_engine_address(),
        governance=config.governance_address,
        factory=config.factory_address,
        init_code_hash=config.pool_init_code_hash,
        wrapped_native=config.wrapped_native_address,
    )


_engine: Optional[IntentsEngine] = None


def get_engine() -> IntentsEngine:
    """Get the singleton engine instance."""
    global _engine
    if _engine is None:
        _engine = build_engine()
    return _engine


__all__ = [
    "IntentsEngine",
    "build_engine",
    "get_engine",
    "default_engine_address",
]
