"""
Configuration — loads settings from .review-packets.yaml, environment
variables, and built-in defaults (in that priority order: CLI args > env >
YAML > defaults).
"""

import os

import yaml


_DEFAULTS = {
    "context_lines": 3,
    "default_side": "RIGHT",
    "special_kinds": ["lock", "binary", "generated", "minified"],
    "safety_net_both_sides": True,
    "metrics_enabled": False,
    "metrics_dir": ".review_packets",
    "log_dir": ".review_packets/logs",
    "log_level": "INFO",
}

# Config file search locations
_CONFIG_FILENAMES = [".review-packets.yaml", ".review-packets.yml"]


def _find_config_file(explicit_path: str | None = None) -> str | None:
    """Find the config file. Checks explicit path, CWD, then user home."""
    if explicit_path:
        if os.path.isfile(explicit_path):
            return explicit_path
        return None

    # Search CWD first, then home directory
    search_dirs = [os.getcwd(), os.path.expanduser("~")]
    for d in search_dirs:
        for name in _CONFIG_FILENAMES:
            path = os.path.join(d, name)
            if os.path.isfile(path):
                return path
    return None


def _load_yaml(path: str) -> dict:
    """Load YAML file, returns empty dict on failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return {}


class Config:
    """Reconciliation settings.

    Settings are resolved in priority order:
    1. CLI arguments (handled by caller)
    2. Environment variables (``REVIEW_PACKETS_*``)
    3. .review-packets.yaml config file
    4. Built-in defaults
    """

    def __init__(self, yaml_data: dict | None = None):
        yd = yaml_data or {}

        # Helper: env var > yaml > default
        def _get(env_key: str, yaml_key: str, default, cast=str):
            env_val = os.getenv(env_key)
            if env_val is not None:
                return cast(env_val)
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return cast(yaml_val)
            return default

        def _get_bool(env_key: str, yaml_key: str, default: bool) -> bool:
            env_val = os.getenv(env_key)
            if env_val is not None:
                return env_val.lower() == "true"
            yaml_val = yd.get(yaml_key)
            if yaml_val is not None:
                return bool(yaml_val)
            return default

        self.CONTEXT_LINES = _get("REVIEW_PACKETS_CONTEXT_LINES", "context_lines",
                                  _DEFAULTS["context_lines"], cast=int)
        if self.CONTEXT_LINES < 0:
            self.CONTEXT_LINES = _DEFAULTS["context_lines"]

        side = _get("REVIEW_PACKETS_DEFAULT_SIDE", "default_side",
                    _DEFAULTS["default_side"]).upper()
        self.DEFAULT_SIDE = side if side in ("LEFT", "RIGHT") else "RIGHT"

        self.SAFETY_NET_BOTH_SIDES = _get_bool(
            "REVIEW_PACKETS_SAFETY_NET_BOTH_SIDES", "safety_net_both_sides",
            _DEFAULTS["safety_net_both_sides"])

        # Special file kinds: shown as a summary, never sliced
        env_kinds = os.getenv("REVIEW_PACKETS_SPECIAL_KINDS")
        if env_kinds is not None:
            kinds = [k.strip() for k in env_kinds.split(",") if k.strip()]
        else:
            kinds = yd.get("special_kinds", _DEFAULTS["special_kinds"])
        if not isinstance(kinds, list):
            kinds = _DEFAULTS["special_kinds"]
        self.SPECIAL_KINDS: list[str] = [str(k).lower() for k in kinds]

        # Metrics log
        self.METRICS_ENABLED = _get_bool("REVIEW_PACKETS_METRICS", "metrics_enabled",
                                         _DEFAULTS["metrics_enabled"])
        self.METRICS_DIR = _get("REVIEW_PACKETS_METRICS_DIR", "metrics_dir",
                                _DEFAULTS["metrics_dir"])

        # Logging
        self.LOG_DIR = _get("REVIEW_PACKETS_LOG_DIR", "log_dir",
                            _DEFAULTS["log_dir"])
        self.LOG_LEVEL = _get("REVIEW_PACKETS_LOG_LEVEL", "log_level",
                              _DEFAULTS["log_level"]).upper()

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load config from YAML file (if found) + env vars + defaults."""
        path = _find_config_file(config_path)
        yaml_data = _load_yaml(path) if path else {}
        return cls(yaml_data)
