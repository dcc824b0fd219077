import json
import os
from pathlib import Path
from typing import Any

from merkle_rewards.core.constants.base import (
    DEFAULT_RPC_MAX_RETRIES,
    DEFAULT_RPC_TIMEOUT,
    DEFAULT_STORE_TIMEOUT,
)

_CONFIG_ENV_KEYS = ("MERKLE_REWARDS_CONFIG_PATH", "MERKLE_REWARDS_CONFIG")
_DEFAULT_CONFIG_FILENAME = "config.json"
_DEFAULT_DB_FILENAME = "merkle_rewards.db"


def _find_project_root(start: Path) -> Path | None:
    cur = start.resolve()
    for parent in [cur, *cur.parents]:
        if (parent / "pyproject.toml").exists():
            return parent
    return None


def _project_root() -> Path | None:
    return _find_project_root(Path.cwd()) or _find_project_root(Path(__file__).parent)


def resolve_config_path(path: str | Path | None = None) -> Path:
    if path is not None:
        return Path(path).expanduser()

    env_path = next(
        (os.getenv(k, "").strip() for k in _CONFIG_ENV_KEYS if os.getenv(k)), ""
    )
    if env_path:
        p = Path(env_path).expanduser()
        if p.is_absolute():
            return p
        root = _project_root()
        return (root / p) if root else p

    root = _project_root()
    return (root / _DEFAULT_CONFIG_FILENAME) if root else Path(_DEFAULT_CONFIG_FILENAME)


def load_config_json(
    path: str | Path | None = None, *, require_exists: bool = False
) -> dict[str, Any]:
    cfg_path = resolve_config_path(path)
    if not cfg_path.exists():
        if require_exists:
            raise FileNotFoundError(f"Config file not found: {cfg_path}")
        return {}
    try:
        return json.loads(cfg_path.read_text())
    except json.JSONDecodeError:
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


def set_rpc_urls(rpc_urls):
    if "strategy" not in CONFIG:
        CONFIG["strategy"] = {}
    CONFIG["strategy"]["rpc_urls"] = rpc_urls


def get_rpc_urls() -> dict[str, Any]:
    return CONFIG.get("strategy", {}).get("rpc_urls", {})


def _merkle_section() -> dict[str, Any]:
    section = CONFIG.get("merkle", {})
    return section if isinstance(section, dict) else {}


def get_distributor_address_overrides() -> dict[int, str]:
    raw = _merkle_section().get("distributor_addresses") or {}
    out: dict[int, str] = {}
    for chain_id, address in raw.items():
        if address:
            out[int(chain_id)] = str(address).strip()
    return out


def _positive_float(value: Any, default: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def get_rpc_timeout_s() -> float:
    return _positive_float(_merkle_section().get("rpc_timeout_s"), DEFAULT_RPC_TIMEOUT)


def get_store_timeout_s() -> float:
    return _positive_float(
        _merkle_section().get("store_timeout_s"), DEFAULT_STORE_TIMEOUT
    )


def get_rpc_max_retries() -> int:
    raw = _merkle_section().get("rpc_max_retries")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_RPC_MAX_RETRIES
    return value if value >= 1 else DEFAULT_RPC_MAX_RETRIES


def get_db_path() -> Path:
    raw = _merkle_section().get("db_path")
    if raw:
        return Path(str(raw)).expanduser()
    root = _project_root()
    return (root / _DEFAULT_DB_FILENAME) if root else Path(_DEFAULT_DB_FILENAME)
