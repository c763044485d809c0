"""
Configuration — loads settings from .rcsfmt.yaml, environment variables,
and built-in defaults (in that priority order: CLI args > env > YAML > defaults).
"""

import os
import shlex

import yaml


_DEFAULTS = {
    "command": "gofmt",
    "args": [],
    "mode": "stdout",
    "stdin": False,
    "width": None,
    "width_flag": "",
    "timeout": 30.0,
    "diff_command": "diff",
    "log_dir": ".rcsfmt/logs",
    "metrics": False,
    "metrics_dir": ".rcsfmt",
}

_MODES = ("stdout", "write")

# Config file search locations
_CONFIG_FILENAMES = [".rcsfmt.yaml", ".rcsfmt.yml"]


class ConfigError(ValueError):
    """Raised for settings that cannot be used."""


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


def _as_args(value) -> list[str]:
    """Accept either a YAML list or a shell-style string of arguments."""
    if value is None:
        return []
    if isinstance(value, str):
        return shlex.split(value)
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    raise ConfigError(f"formatter args must be a list or string, got {value!r}")


class Config:
    """Application configuration.

    Settings are resolved in priority order:
    1. CLI arguments (see :meth:`override`)
    2. Environment variables
    3. .rcsfmt.yaml config file
    4. Built-in defaults
    """

    def __init__(self, yaml_data: dict | None = None):
        yd = yaml_data or {}
        fd = yd.get("formatter", {}) if isinstance(yd.get("formatter"), dict) else {}

        # Helper: env var > yaml > default
        def _get(env_key: str, section: dict, yaml_key: str, default, cast=str):
            env_val = os.getenv(env_key)
            if env_val is not None:
                return cast(env_val)
            yaml_val = section.get(yaml_key)
            if yaml_val is not None:
                return cast(yaml_val)
            return default

        def _get_bool(env_key: str, section: dict, yaml_key: str, default: bool) -> bool:
            env_val = os.getenv(env_key)
            if env_val is not None:
                return env_val.lower() == "true"
            yaml_val = section.get(yaml_key)
            if yaml_val is not None:
                return bool(yaml_val)
            return default

        # Formatter
        self.COMMAND = _get("RCSFMT_COMMAND", fd, "command", _DEFAULTS["command"])
        self.ARGS = _get("RCSFMT_ARGS", fd, "args", _DEFAULTS["args"], cast=_as_args)
        self.MODE = _get("RCSFMT_MODE", fd, "mode", _DEFAULTS["mode"])
        self.STDIN = _get_bool("RCSFMT_STDIN", fd, "stdin", _DEFAULTS["stdin"])
        self.WIDTH = _get("RCSFMT_WIDTH", fd, "width", _DEFAULTS["width"], cast=int)
        self.WIDTH_FLAG = _get("RCSFMT_WIDTH_FLAG", fd, "width_flag",
                               _DEFAULTS["width_flag"])
        self.TIMEOUT = _get("RCSFMT_TIMEOUT", fd, "timeout",
                            _DEFAULTS["timeout"], cast=float)

        # Diff producer
        self.DIFF_COMMAND = _get("RCSFMT_DIFF_COMMAND", yd, "diff_command",
                                 _DEFAULTS["diff_command"])

        # Logging and metrics
        self.LOG_DIR = _get("RCSFMT_LOG_DIR", yd, "log_dir", _DEFAULTS["log_dir"])
        self.METRICS = _get_bool("RCSFMT_METRICS", yd, "metrics", _DEFAULTS["metrics"])
        self.METRICS_DIR = _get("RCSFMT_METRICS_DIR", yd, "metrics_dir",
                                _DEFAULTS["metrics_dir"])

        self.validate()

    def validate(self) -> None:
        if self.MODE not in _MODES:
            raise ConfigError(
                f"formatter mode must be one of {', '.join(_MODES)}, got {self.MODE!r}"
            )
        if self.WIDTH is not None and self.WIDTH <= 0:
            raise ConfigError(f"formatter width must be positive, got {self.WIDTH}")
        if self.WIDTH is not None and not self.WIDTH_FLAG:
            raise ConfigError("formatter width is set but width_flag is empty")
        if self.TIMEOUT <= 0:
            raise ConfigError(f"formatter timeout must be positive, got {self.TIMEOUT}")

    def override(self, command: str | None = None, width: int | None = None,
                 width_flag: str | None = None) -> "Config":
        """Apply CLI overrides in place and return self."""
        if command:
            parts = shlex.split(command)
            self.COMMAND, self.ARGS = parts[0], parts[1:]
        if width_flag:
            self.WIDTH_FLAG = width_flag
        if width is not None:
            self.WIDTH = width
        self.validate()
        return self

    def formatter_argv(self, file_path: str | None) -> list[str]:
        """Build the formatter command line.

        ``{file}`` in the configured args is replaced with ``file_path``;
        in non-stdin mode the path is appended when no placeholder is used.
        """
        argv = [self.COMMAND]
        if self.WIDTH is not None:
            argv += [self.WIDTH_FLAG, str(self.WIDTH)]

        used_placeholder = False
        for arg in self.ARGS:
            if "{file}" in arg:
                used_placeholder = True
                if file_path is not None:
                    arg = arg.replace("{file}", file_path)
            argv.append(arg)

        if not self.STDIN and not used_placeholder and file_path is not None:
            argv.append(file_path)
        return argv

    @classmethod
    def load(cls, config_path: str | None = None) -> "Config":
        """Load config from YAML file (if found) + env vars + defaults."""
        path = _find_config_file(config_path)
        yaml_data = _load_yaml(path) if path else {}
        return cls(yaml_data)
