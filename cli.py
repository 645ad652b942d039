#!/usr/bin/env python3
"""Command line front end for the intent engine.

Runs the engine in-process by default; ``--api URL`` sends the same requests
to a running intent engine API instead.
"""

import argparse
import sys
from typing import Any, Dict, Optional

import httpx

from intent_engine.config import settings
from intent_engine.core.amounts import hex_to_bytes
from intent_engine.core.engine import get_engine
from intent_engine.core.errors import IntentError
from intent_engine.logging_config import setup_logging


def print_preview(intent: str, preview: Dict[str, Any]) -> None:
    print(f"\n🧾 Preview: {intent}")
    print("=" * 50)
    print(f"Kind:      {preview['kind']}")
    print(f"Target:    {preview['to']}")
    print(f"Value:     {preview['value']}")
    print(f"Data:      {preview['data']}")
    print(f"Operation: {preview['call_data']}")


def _api_call(base_url: str, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    with httpx.Client(timeout=settings.rpc_timeout_seconds) as client:
        response = client.request(method, f"{base_url.rstrip('/')}{path}", json=payload)
    if response.status_code >= 400:
        detail = response.json().get("detail", {})
        raise SystemExit(f"❌ {detail.get('error', response.status_code)}: {detail.get('message', response.text)}")
    return response.json()


def cli_preview(intent: str, api: Optional[str]) -> None:
    if api:
        preview = _api_call(api, "POST", "/commands/preview", {"intent": intent})
    else:
        preview = get_engine().preview(intent).to_dict()
    print_preview(intent, preview)


def cli_translate(call_data: str, api: Optional[str]) -> None:
    if api:
        intent = _api_call(api, "POST", "/commands/translate", {"call_data": call_data})["intent"]
    else:
        intent = get_engine().translate(hex_to_bytes(call_data))
    print(f"🔁 {intent}")


def cli_verify(intent: str, call_data: str, api: Optional[str]) -> None:
    if api:
        valid = _api_call(api, "POST", "/commands/verify", {"intent": intent, "call_data": call_data})["valid"]
    else:
        valid = get_engine().verify(intent, hex_to_bytes(call_data))
    if valid:
        print(f"✅ Operation matches: {intent}")
    else:
        print(f"⚠️  Operation does NOT match: {intent}")
        sys.exit(1)


def cli_whois(name: str, api: Optional[str]) -> None:
    if api:
        record = _api_call(api, "GET", f"/names/{name}")
    else:
        found = get_engine().what_is_the_address_of(name)
        record = {"owner": found.owner, "receiver": found.receiver, "node": found.node}
    print(f"📇 {name}")
    print(f"Owner:    {record['owner']}")
    print(f"Receiver: {record['receiver']}")
    print(f"Node:     {record['node']}")


def cli_balance(name: str, asset: str, api: Optional[str]) -> None:
    if api:
        data = _api_call(api, "GET", f"/balances/{name}/{asset}")
        raw, adjusted = data["balance"], data["balance_adjusted"]
    else:
        raw, adjusted = get_engine().what_is_the_balance_of(name, asset)
    print(f"💰 {name}: {adjusted} {asset.upper()} ({raw} raw)")


def cli_supply(asset: str, api: Optional[str]) -> None:
    if api:
        data = _api_call(api, "GET", f"/supply/{asset}")
        raw, adjusted = data["supply"], data["supply_adjusted"]
    else:
        raw, adjusted = get_engine().what_is_the_total_supply_of(asset)
    print(f"🏦 {asset.upper()} supply: {adjusted} ({raw} raw)")


def cli_serve(host: str, port: int) -> None:
    import uvicorn
    uvicorn.run("intent_engine.main:app", host=host, port=port, log_level=settings.log_level.lower())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Intent Engine CLI")
    parser.add_argument("--api", help="Base URL of a running intent engine API")
    subparsers = parser.add_subparsers(dest="command")

    preview_parser = subparsers.add_parser("preview", help="Show the call a command would make")
    preview_parser.add_argument("intent", help="Command text, quoted")

    translate_parser = subparsers.add_parser("translate", help="Render an operation payload as a command")
    translate_parser.add_argument("call_data", help="Hex execute(address,uint256,bytes) payload")

    verify_parser = subparsers.add_parser("verify", help="Check an operation payload against a command")
    verify_parser.add_argument("intent", help="Command text, quoted")
    verify_parser.add_argument("call_data", help="Hex operation payload")

    whois_parser = subparsers.add_parser("whois", help="Resolve a name")
    whois_parser.add_argument("name")

    balance_parser = subparsers.add_parser("balance", help="Balance of a name in an asset")
    balance_parser.add_argument("name")
    balance_parser.add_argument("asset")

    supply_parser = subparsers.add_parser("supply", help="Total supply of an asset")
    supply_parser.add_argument("asset")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=settings.host)
    serve_parser.add_argument("--port", type=int, default=settings.port)

    return parser


def main(argv: Optional[list] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    setup_logging(json_logs=False, stream=sys.stderr)
    command = args.command.lower()

    try:
        if command == "preview":
            cli_preview(args.intent, args.api)
        elif command == "translate":
            cli_translate(args.call_data, args.api)
        elif command == "verify":
            cli_verify(args.intent, args.call_data, args.api)
        elif command == "whois":
            cli_whois(args.name, args.api)
        elif command == "balance":
            cli_balance(args.name, args.asset, args.api)
        elif command == "supply":
            cli_supply(args.asset, args.api)
        elif command == "serve":
            cli_serve(args.host, args.port)
        else:
            print(f"❌ Unknown command: {command}")
            parser.print_help()
    except IntentError as e:
        print(f"❌ {e.code}: {e.message}")
        sys.exit(2)


if __name__ == "__main__":
    main()
