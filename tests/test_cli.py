"""Unit tests for CLI (main.py) commands."""

import json
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from warranty_claims.main import _option, _usage, main


def run_cli(argv, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["warranty-claims", *argv])
    main()


@pytest.fixture(autouse=True)
def log_backend(monkeypatch):
    monkeypatch.setenv("EMAIL_BACKEND", "log")


class TestUsage:
    def test_usage_mentions_commands(self):
        text = _usage()
        for cmd in ("serve", "status", "history", "list", "transition", "brands", "seed"):
            assert cmd in text

    def test_option_parsing(self):
        assert _option(["--status=Resolved", "--order=42"], "order") == "42"
        assert _option(["--debug"], "status") is None


class TestCommands:
    def test_no_args_exits(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc:
            run_cli([], monkeypatch)
        assert exc.value.code == 1
        assert "Usage" in capsys.readouterr().err

    def test_unknown_command(self, monkeypatch, capsys):
        with pytest.raises(SystemExit):
            run_cli(["frobnicate"], monkeypatch)
        assert "Unknown command" in capsys.readouterr().err

    def test_status(self, make_claim, monkeypatch, capsys):
        claim = make_claim(order_number="ORD-77")
        run_cli(["status", claim.id], monkeypatch)
        assert json.loads(capsys.readouterr().out)["orderNumber"] == "ORD-77"

    def test_status_missing_claim(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc:
            run_cli(["status", "CLM-NOPE"], monkeypatch)
        assert exc.value.code == 1
        assert "Claim not found" in capsys.readouterr().err

    def test_status_requires_id(self, monkeypatch, capsys):
        with pytest.raises(SystemExit):
            run_cli(["status"], monkeypatch)
        assert "requires <claim_id>" in capsys.readouterr().err

    def test_transition_with_multiword_status(self, make_claim, claim_repo, monkeypatch, capsys):
        claim = make_claim()
        run_cli(["transition", claim.id, "In", "Progress"], monkeypatch)
        assert json.loads(capsys.readouterr().out)["status"] == "In Progress"
        assert claim_repo.get_notification_log(claim.id)[0]["outcome"] == "sent"

    def test_transition_invalid_status(self, make_claim, monkeypatch, capsys):
        claim = make_claim()
        with pytest.raises(SystemExit):
            run_cli(["transition", claim.id, "Closed"], monkeypatch)
        assert "Invalid status" in capsys.readouterr().err

    def test_history(self, make_claim, monkeypatch, capsys):
        claim = make_claim()
        run_cli(["history", claim.id], monkeypatch)
        history = json.loads(capsys.readouterr().out)
        assert history[0]["action"] == "created"

    def test_list_with_filters(self, make_claim, monkeypatch, capsys):
        make_claim(order_number="Order42")
        make_claim(order_number="ORD-1")
        run_cli(["list", "--order=42", "--status=Pending"], monkeypatch)
        assert [c["orderNumber"] for c in json.loads(capsys.readouterr().out)] == ["Order42"]

    def test_seed_and_brands(self, monkeypatch, capsys):
        data = Path(__file__).resolve().parent.parent / "data" / "seed.json"
        run_cli(["seed", str(data)], monkeypatch)
        counts = json.loads(capsys.readouterr().out)
        assert counts == {"brands": 3, "claims": 3, "skipped": 0}

        run_cli(["brands", "fr"], monkeypatch)
        brands = {b["name"]: b["notification"] for b in json.loads(capsys.readouterr().out)}
        assert brands["Nordlicht"].startswith("Les produits Nordlicht")
        assert brands["Solano"].startswith("Solano handles")

    def test_seed_missing_file(self, monkeypatch, capsys, tmp_path):
        with pytest.raises(SystemExit):
            run_cli(["seed", str(tmp_path / "nope.json")], monkeypatch)
        assert "File not found" in capsys.readouterr().err

    def test_seed_invalid_json(self, monkeypatch, capsys, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        with pytest.raises(SystemExit):
            run_cli(["seed", str(bad)], monkeypatch)
        assert "Invalid JSON" in capsys.readouterr().err

    def test_serve_passes_host_and_port(self, monkeypatch):
        with patch("warranty_claims.main.cmd_serve") as serve:
            run_cli(["serve", "--host=0.0.0.0", "--port=9001"], monkeypatch)
        serve.assert_called_once_with("0.0.0.0", 9001)

    def test_serve_rejects_bad_port(self, monkeypatch, capsys):
        with pytest.raises(SystemExit):
            run_cli(["serve", "--port=abc"], monkeypatch)
        assert "Invalid port" in capsys.readouterr().err
