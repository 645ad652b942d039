"""
CLI tests running the engine in-process.
"""

import pytest

import cli

RECIPIENT = "0x1c0aa8ccd568d90d61659f060d1bfb1e6f855a20"


@pytest.fixture(autouse=True)
def local_engine(monkeypatch, engine):
    monkeypatch.setattr(cli, "get_engine", lambda: engine)
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)
    return engine


def test_preview_prints_operation(capsys, engine):
    cli.main(["preview", f"send 1 eth to {RECIPIENT}"])

    out = capsys.readouterr().out
    assert "Kind:      send" in out
    assert "0x" + engine.preview(f"send 1 eth to {RECIPIENT}").call_data.hex() in out


def test_translate(capsys, engine):
    payload = "0x" + engine.preview(f"send 20 dai to {RECIPIENT}").call_data.hex()

    cli.main(["translate", payload])

    assert f"send 20 DAI to {RECIPIENT}" in capsys.readouterr().out


def test_verify_mismatch_exits_nonzero(engine):
    payload = "0x" + engine.preview("send vitalik 1 eth").call_data.hex()

    with pytest.raises(SystemExit) as exc_info:
        cli.main(["verify", "send vitalik 2 eth", payload])
    assert exc_info.value.code == 1


def test_engine_error_is_reported(capsys):
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["whois", "nobody"])

    assert exc_info.value.code == 2
    assert "unknown_name" in capsys.readouterr().out


def test_balance(capsys, ledger):
    ledger.mint("0x6B175474E89094C44Da98b954EedeAC495271d0F", "0xd8da6bf26964af9d7eed9e03e53415d37aa96045", 10**18)

    cli.main(["balance", "vitalik", "dai"])

    assert "💰 vitalik: 1 DAI" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    cli.main([])
    assert "Intent Engine CLI" in capsys.readouterr().out
