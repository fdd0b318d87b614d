"""Loading and provisioning of the Pushbullet client credentials."""

from __future__ import annotations

import logging
from typing import Optional

from forum_pushbullet.clients import SQLiteStore
from forum_pushbullet.core.config import PluginConfig, PushbulletSettings

logger = logging.getLogger(__name__)

PLUGIN_SETTINGS_KEY = "settings:pushbullet"


def load_plugin_config(
    api_settings: PushbulletSettings, store: SQLiteStore
) -> Optional[PluginConfig]:
    """Environment credentials win; otherwise use the provisioned record."""
    if api_settings.client_id and api_settings.client_secret:
        return PluginConfig(
            client_id=api_settings.client_id,
            client_secret=api_settings.client_secret,
        )

    record = store.get_fields(PLUGIN_SETTINGS_KEY, ["id", "secret"])
    if record.get("id") and record.get("secret"):
        return PluginConfig(client_id=str(record["id"]), client_secret=str(record["secret"]))

    logger.info(
        "Pushbullet is not configured yet; run `python -m scripts.configure_plugin set`"
    )
    return None


def save_plugin_config(store: SQLiteStore, config: PluginConfig) -> None:
    store.set_fields(
        PLUGIN_SETTINGS_KEY, {"id": config.client_id, "secret": config.client_secret}
    )


def clear_plugin_config(store: SQLiteStore) -> None:
    store.delete(PLUGIN_SETTINGS_KEY)


__all__ = [
    "PLUGIN_SETTINGS_KEY",
    "clear_plugin_config",
    "load_plugin_config",
    "save_plugin_config",
]
