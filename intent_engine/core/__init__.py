"""
Intents engine core

- grammar: command normalization, action classification, positional matching
- amounts: fixed-precision amount parsing and hex/account conversions
- assets: built-in and governance alias resolution
- routing: deterministic pool derivation and liquidity routing
- settlement: pool settlement and the authenticated funding callback
- translator: payload -> command text and payload verification
- engine: the IntentsEngine facade

Usage:
    from intent_engine.core.engine import get_engine

    engine = get_engine()
    preview = engine.preview("send 20 dai to vitalik")
    engine.translate(preview.call_data)
"""
