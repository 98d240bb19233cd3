from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import ValidationError

from charge_finder.models.config import AppConfig

logger = logging.getLogger(__name__)

DOTENV_FILENAME = ".env.json"
AUTH_TOKEN_KEY = "AUTH_TOKEN"


def load_app_config(config_path: Path | None, *, dotenv_path: Path | None = None) -> AppConfig:
    if config_path is None:
        config_path = Path("config.yaml")

    loaded: Any = {}
    if config_path.exists():
        try:
            loaded = yaml.safe_load(config_path.read_text()) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Config file is not valid YAML: {config_path}") from exc
    else:
        logger.info("Config file %s not found; using defaults", config_path)

    if not isinstance(loaded, dict):
        raise ValueError("Top-level config must be a mapping")

    try:
        config = AppConfig.model_validate(cast(dict[str, Any], loaded))
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration in {config_path}: {exc}") from exc

    if not config.home_control.token:
        token = load_auth_token(dotenv_path or Path.cwd() / DOTENV_FILENAME)
        config.home_control.token = token
    return config


def load_auth_token(dotenv_path: Path) -> str:
    """Read the API token from a JSON dotenv file."""
    if not dotenv_path.exists():
        raise ValueError(
            f"No home_control.token configured and {dotenv_path} does not exist"
        )
    try:
        values: Any = json.loads(dotenv_path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"{dotenv_path} is not valid JSON") from exc

    if not isinstance(values, dict):
        raise ValueError(f"{dotenv_path} must contain a JSON object")
    token = cast(dict[str, Any], values).get(AUTH_TOKEN_KEY)
    if not isinstance(token, str) or not token:
        raise ValueError(f"{AUTH_TOKEN_KEY} missing from {dotenv_path}")
    return token
