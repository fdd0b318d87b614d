"""Tests for the credential provisioning script."""

from __future__ import annotations

from pathlib import Path

import pytest

from forum_pushbullet.clients import SQLiteStore
from forum_pushbullet.core.config import PluginConfig, PushbulletSettings
from forum_pushbullet.services.plugin_config import PLUGIN_SETTINGS_KEY, load_plugin_config
from scripts import configure_plugin


def test_set_show_and_clear(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    db_path = str(tmp_path / "forum.db")

    exit_code = configure_plugin.main(
        ["set", "--db-path", db_path, "--client-id", "client-123", "--client-secret", "supersecret"]
    )
    assert exit_code == configure_plugin.EXIT_OK
    assert SQLiteStore(db_path).get_all(PLUGIN_SETTINGS_KEY) == {
        "id": "client-123",
        "secret": "supersecret",
    }

    capsys.readouterr()
    assert configure_plugin.main(["show", "--db-path", db_path]) == configure_plugin.EXIT_OK
    shown = capsys.readouterr().out
    assert "client-123" in shown
    assert "supersecret" not in shown
    assert "su*******et" in shown

    assert configure_plugin.main(["clear", "--db-path", db_path]) == configure_plugin.EXIT_OK
    assert (
        configure_plugin.main(["show", "--db-path", db_path])
        == configure_plugin.EXIT_NOT_CONFIGURED
    )


def test_show_reports_unconfigured_store(tmp_path: Path) -> None:
    exit_code = configure_plugin.main(["show", "--db-path", str(tmp_path / "empty.db")])
    assert exit_code == configure_plugin.EXIT_NOT_CONFIGURED


def test_unusable_db_path_is_a_runtime_error(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")

    exit_code = configure_plugin.main(["show", "--db-path", str(blocker / "forum.db")])
    assert exit_code == configure_plugin.EXIT_RUNTIME_ERROR


def test_environment_credentials_take_precedence(store: SQLiteStore) -> None:
    store.set_fields(PLUGIN_SETTINGS_KEY, {"id": "stored", "secret": "stored-secret"})

    from_env = load_plugin_config(
        PushbulletSettings(client_id="env", client_secret="env-secret"), store
    )
    from_store = load_plugin_config(
        PushbulletSettings(client_id=None, client_secret=None), store
    )

    assert from_env == PluginConfig(client_id="env", client_secret="env-secret")
    assert from_store == PluginConfig(client_id="stored", client_secret="stored-secret")


def test_partial_credentials_count_as_unconfigured(store: SQLiteStore) -> None:
    store.set_field(PLUGIN_SETTINGS_KEY, "id", "only-id")

    assert load_plugin_config(PushbulletSettings(client_id=None, client_secret=None), store) is None
