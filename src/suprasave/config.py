"""Reconciler configuration and its optional on-disk persistence."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Tuple

from suprasave.data.errors import DataLoadError
from suprasave.data.json_loader import load_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReconcilerConfig:
    """Names of the top-level save properties the reconciler reads."""

    removed_fields: Tuple[str, ...] = ("ThingsToRemove",)
    activated_fields: Tuple[str, ...] = ("ThingsToActivate",)
    force_opened_fields: Tuple[str, ...] = ("ThingsToOpenForever",)
    position_field: str = "Player Position"
    # Array fields whose instance names need a leading capital to match the catalog.
    capitalize_instance_fields: Tuple[str, ...] = ()

    @property
    def found_fields(self) -> Tuple[str, ...]:
        return self.removed_fields + self.activated_fields + self.force_opened_fields


DEFAULT_CONFIG = ReconcilerConfig()

_TUPLE_FIELDS = (
    "removed_fields",
    "activated_fields",
    "force_opened_fields",
    "capitalize_instance_fields",
)


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "suprasave"
        return Path.home() / "suprasave"
    return Path.home() / ".config" / "suprasave"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def _normalize_names(value: object, default: Tuple[str, ...]) -> Tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(entry, str) and entry for entry in value):
        return default
    return tuple(value)


def config_from_mapping(raw: object) -> ReconcilerConfig:
    """Build a config from a decoded JSON object, keeping defaults for bad keys."""
    if not isinstance(raw, dict):
        return DEFAULT_CONFIG
    values = {
        name: _normalize_names(raw.get(name), getattr(DEFAULT_CONFIG, name)) for name in _TUPLE_FIELDS
    }
    position_field = raw.get("position_field")
    if not isinstance(position_field, str) or not position_field:
        position_field = DEFAULT_CONFIG.position_field
    return ReconcilerConfig(position_field=position_field, **values)


def load_config(path: Path | None = None) -> ReconcilerConfig:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    if not config_path.exists():
        return DEFAULT_CONFIG
    try:
        raw = load_json(config_path, "Reconciler config")
    except DataLoadError as exc:
        logger.warning("Using default settings: %s", exc)
        return DEFAULT_CONFIG
    return config_from_mapping(raw)


def save_config(config: ReconcilerConfig, path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {key: list(value) if isinstance(value, tuple) else value for key, value in asdict(config).items()}
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
