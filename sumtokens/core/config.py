import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

from sumtokens.core.constants.base import (
    ALGORAND_INDEXER_URL,
    DEFAULT_INDEXER_TIMEOUT,
    DEFAULT_RATE_LIMIT_INTERVAL,
    DEFAULT_RATE_LIMIT_TOKENS,
)
from sumtokens.core.constants.chains import CHAIN_ALGORAND

_CONFIG_ENV_KEYS = ("SUMTOKENS_CONFIG_PATH", "SUMTOKENS_CONFIG")
_DEFAULT_CONFIG_FILENAME = "config.json"

_DEFAULT_INDEXER_URLS = {
    CHAIN_ALGORAND: ALGORAND_INDEXER_URL,
}


def _project_root() -> Path | None:
    """Nearest directory holding ``pyproject.toml``, searched from cwd then this package."""
    for start in (Path.cwd(), Path(__file__).resolve().parent):
        for directory in (start, *start.parents):
            if (directory / "pyproject.toml").is_file():
                return directory
    return None


def _env_config_path() -> str | None:
    for key in _CONFIG_ENV_KEYS:
        value = os.getenv(key, "").strip()
        if value:
            return value
    return None


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Explicit ``path``, else the env override, else ``config.json``.

    Relative env values and the default file are taken from the project root.
    """
    if path is not None:
        return Path(path).expanduser()
    candidate = Path(_env_config_path() or _DEFAULT_CONFIG_FILENAME).expanduser()
    if candidate.is_absolute():
        return candidate
    root = _project_root()
    return root / candidate if root else candidate


def load_config_json(
    path: str | Path | None = None, *, require_exists: bool = False
) -> dict[str, Any]:
    cfg_path = resolve_config_path(path)
    try:
        text = cfg_path.read_text()
    except FileNotFoundError:
        if require_exists:
            raise FileNotFoundError(f"Config file not found: {cfg_path}") from None
        return {}
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning(f"Ignoring unreadable config file {cfg_path}: {exc}")
        return {}


CONFIG: dict[str, Any] = load_config_json()


def set_config(config: dict[str, Any]) -> None:
    """Replace the global CONFIG dict in-place.

    This allows code that imported CONFIG at module import time to see updates.
    """
    CONFIG.clear()
    CONFIG.update(config)


def load_config(
    path: str | Path | None = None, *, require_exists: bool = False
) -> None:
    """Load config from disk into the global CONFIG dict."""
    set_config(load_config_json(path, require_exists=require_exists))


def get_indexer_base_url(chain: str) -> str:
    indexers = CONFIG.get("indexers", {})
    url = indexers.get(chain)
    if url:
        return str(url).strip().rstrip("/")
    default = _DEFAULT_INDEXER_URLS.get(chain)
    if default is None:
        raise KeyError(f"No indexer configured for chain {chain!r}")
    return default


def get_http_timeout() -> float:
    system = CONFIG.get("system", {})
    timeout = system.get("http_timeout")
    if timeout is not None:
        return float(timeout)
    return DEFAULT_INDEXER_TIMEOUT


def get_rate_limit(chain: str) -> tuple[int, float]:
    """Return ``(tokens_per_interval, interval_seconds)`` for a chain's indexer."""
    limits = CONFIG.get("rate_limits", {}).get(chain, {})
    tokens = int(limits.get("tokens", DEFAULT_RATE_LIMIT_TOKENS))
    interval = float(limits.get("interval", DEFAULT_RATE_LIMIT_INTERVAL))
    return tokens, interval


def get_integration_config() -> dict[str, dict[str, Any]]:
    return CONFIG.get("integrations", {})
