import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import main
from main import _parse_args


def test_default_command_invokes_serve() -> None:
    args = _parse_args([])
    assert args.command == "serve"
    assert args.port == 8080


def test_default_command_accepts_options_without_subcommand() -> None:
    args = _parse_args(["--host", "127.0.0.1", "--port", "9000"])
    assert args.command == "serve"
    assert args.host == "127.0.0.1"
    assert args.port == 9000


def test_register_subcommand_arguments() -> None:
    args = _parse_args(["register", "M1MIK", "m1mik@example.com", "--first", "Mike", "--sip"])
    assert args.command == "register"
    assert args.callsign == "M1MIK"
    assert args.email == "m1mik@example.com"
    assert args.first == "Mike"
    assert args.last == ""
    assert args.sip is True


def test_extension_command_prints_value(capsys) -> None:
    assert main.main(["extension", "AB"]) == 0
    assert capsys.readouterr().out.strip() == "209"


def test_offline_registration_assigns_identifier(monkeypatch, capsys) -> None:
    monkeypatch.setenv("REGISTRAR_BCRYPT_ROUNDS", "4")
    monkeypatch.setattr(main, "getpass", lambda prompt="": "longenoughpassword")
    code = main.main(
        ["register", "M1MIK", "time123hotel@example.com", "--first", "Mike", "--last", "Hotel", "--sip"]
    )
    out = capsys.readouterr().out
    assert code == 0
    assert "RESULT: OK, Callsign: M1MIK" in out
    assert "extension:    348226" in out
    assert "id:           0\n" not in out


def test_offline_registration_reports_errors(monkeypatch, capsys) -> None:
    monkeypatch.setenv("REGISTRAR_BCRYPT_ROUNDS", "4")
    monkeypatch.setattr(main, "getpass", lambda prompt="": "longenoughpassword")
    code = main.main(["register", "M1-MIK", "time123hotel@example.com"])
    assert code == 1
    assert "ERROR: callsign contains illegal characters" in capsys.readouterr().err


def test_extension_command_accepts_undecodable_arguments(capsys) -> None:
    assert main.main(["extension", "\udcffA"]) == 0
    assert capsys.readouterr().out.strip() == "654880"
