import json
from pathlib import Path

import pytest
import requests

from tigron_sms import cli

from conftest import FakeSession


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)
    for name in ["TIGRON_SMS_CONFIG", "TIGRON_USERNAME", "TIGRON_PASSWORD"]:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_path(tmp_path: Path) -> str:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"username": "u", "password": "p", "from_number": "+32.1"}), encoding="utf-8")
    return str(path)


def test_init_writes_config(tmp_path: Path):
    config_dir = tmp_path / "conf"
    rc = cli.main(["init", "--config-dir", str(config_dir), "--username", "alice",
                   "--password", "pw", "--to-number", "+32.2"])

    assert rc == 0
    data = json.loads((config_dir / "config.json").read_text(encoding="utf-8"))
    assert data == {"username": "alice", "password": "pw", "to_number": "+32.2"}


def test_init_refuses_to_overwrite(tmp_path: Path):
    args = ["init", "--config-dir", str(tmp_path), "--username", "a", "--password", "b"]
    assert cli.main(args) == 0
    assert cli.main(args) == 1
    assert cli.main(args + ["--force"]) == 0


def test_send(config_path, session, monkeypatch, capsys):
    monkeypatch.setattr(requests, "Session", lambda: session)

    rc = cli.main(["send", "hello", "--to", "+32.2", "--config", config_path])

    assert rc == 0
    assert "SMS sent successfully" in capsys.readouterr().out
    assert [post["url"].rsplit("/", 1)[-1] for post in session.posts] == ["user?WSDL", "sms?WSDL"]


def test_send_without_recipient_fails(config_path, capsys):
    assert cli.main(["send", "hello", "--config", config_path]) == 1
    assert "Error:" in capsys.readouterr().err


def test_send_reports_transport_failure(config_path, monkeypatch, capsys):
    failing = FakeSession({"user": requests.exceptions.ConnectionError("refused")})
    monkeypatch.setattr(requests, "Session", lambda: failing)

    assert cli.main(["send", "hello", "--to", "+32.2", "--config", config_path]) == 1
    assert "refused" in capsys.readouterr().err


def test_info_prints_pairs(config_path, session, monkeypatch, capsys):
    monkeypatch.setattr(requests, "Session", lambda: session)

    assert cli.main(["info", "--config", config_path]) == 0
    out = capsys.readouterr().out
    assert "id: 42" in out
    assert "name: alice" in out


def test_missing_config(tmp_path: Path, capsys):
    assert cli.main(["info", "--config", str(tmp_path / "missing.json")]) == 1
    assert "Config file not found" in capsys.readouterr().err


def test_log_level_is_case_insensitive(config_path, session, monkeypatch):
    levels = []
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: levels.append(kwargs["log_level"]))
    monkeypatch.setattr(requests, "Session", lambda: session)

    assert cli.main(["--log-level", "debug", "info", "--config", config_path]) == 0
    assert levels == ["DEBUG"]


def test_unknown_log_level_rejected(config_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--log-level", "verbose", "info", "--config", config_path])
    assert excinfo.value.code == 2
    assert "invalid choice" in capsys.readouterr().err
