"""System tests for scripts/create_user.py."""

import importlib.util
import uuid
from pathlib import Path

import pytest

from user_accounts.config import Settings

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "create_user.py"


@pytest.fixture
def script():
    module_spec = importlib.util.spec_from_file_location("create_user_script", SCRIPT)
    module = importlib.util.module_from_spec(module_spec)
    module_spec.loader.exec_module(module)
    return module


def _argv(email: str, password: str = "AdminPass123") -> list:
    return ["--username", "admin", "--email", email, "--role", "admin", "--password", password]


def test_creates_account(script, capsys):
    email = f"admin-{uuid.uuid4().hex[:8]}@example.com"

    assert script.main(_argv(email)) == 0
    assert f"Created admin {email}" in capsys.readouterr().out


def test_duplicate_account_fails(script, capsys):
    email = f"admin-{uuid.uuid4().hex[:8]}@example.com"
    script.main(_argv(email))

    assert script.main(_argv(email)) == 1
    assert "FAIL: Registration failed." in capsys.readouterr().out


def test_invalid_email_fails(script, capsys):
    assert script.main(_argv("not-an-email")) == 1
    assert "email" in capsys.readouterr().out


def test_missing_secret_fails(script, monkeypatch, capsys):
    monkeypatch.setattr(script, "get_settings", lambda: Settings(_env_file=None, jwt_secret=None))

    assert script.main(_argv("x@example.com")) == 1
    assert "JWT_SECRET" in capsys.readouterr().out
