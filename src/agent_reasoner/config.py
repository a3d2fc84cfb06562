"""Configuration system: effort table plus platformdirs-backed settings."""

import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

import platformdirs

from .errors import ConfigError

APP_NAME = "agent-reasoner"
APP_AUTHOR = "agent-reasoner"


@dataclass(frozen=True)
class EffortConfig:
	"""Bounds and pacing selected by an effort level."""

	max_iterations: int
	planning_depth: int
	reflection_enabled: bool
	thinking_time_ms: int
	temperature: float

	def with_max_iterations(self, max_iterations: int) -> "EffortConfig":
		return replace(self, max_iterations=max_iterations)

	def to_dict(self) -> dict[str, Any]:
		return {
			"maxIterations": self.max_iterations,
			"planningDepth": self.planning_depth,
			"reflectionEnabled": self.reflection_enabled,
			"thinkingTime": self.thinking_time_ms,
			"temperature": self.temperature,
		}


EFFORT_CONFIGS: Mapping[str, EffortConfig] = MappingProxyType({
	"low": EffortConfig(
		max_iterations=3,
		planning_depth=1,
		reflection_enabled=False,
		thinking_time_ms=1000,
		temperature=0.3,
	),
	"medium": EffortConfig(
		max_iterations=7,
		planning_depth=2,
		reflection_enabled=True,
		thinking_time_ms=3000,
		temperature=0.5,
	),
	"high": EffortConfig(
		max_iterations=12,
		planning_depth=3,
		reflection_enabled=True,
		thinking_time_ms=5000,
		temperature=0.7,
	),
	"maximum": EffortConfig(
		max_iterations=20,
		planning_depth=4,
		reflection_enabled=True,
		thinking_time_ms=10000,
		temperature=0.8,
	),
})

DEFAULT_EFFORT = "medium"


def get_effort_config(effort: str) -> EffortConfig:
	"""Look up an effort level, raising ConfigError for unknown names."""
	try:
		return EFFORT_CONFIGS[effort]
	except KeyError:
		known = ", ".join(EFFORT_CONFIGS)
		raise ConfigError(f"Unknown effort level '{effort}' (expected one of: {known})") from None


@dataclass
class Config:
	"""Central configuration with XDG/platform conventions."""

	config_dir: Path = field(default_factory=lambda: Path(platformdirs.user_config_dir(APP_NAME)))
	data_dir: Path = field(default_factory=lambda: Path(platformdirs.user_data_dir(APP_NAME)))

	# Derived paths
	history_db_path: Path = field(init=False)
	log_dir: Path = field(init=False)

	# Reasoning defaults
	effort: str = DEFAULT_EFFORT
	max_iterations: Optional[int] = None  # None -> use the effort's bound
	enable_reflection: bool = True
	enable_planning: bool = True
	log_level: str = "INFO"

	def __post_init__(self) -> None:
		self.history_db_path = self.data_dir / "history.db"
		self.log_dir = self.data_dir / "logs"

	def ensure_dirs(self) -> None:
		"""Create all required directories."""
		self.config_dir.mkdir(parents=True, exist_ok=True)
		self.data_dir.mkdir(parents=True, exist_ok=True)
		self.log_dir.mkdir(parents=True, exist_ok=True)

	def validate(self) -> None:
		"""Raise ConfigError if the reasoning settings are unusable."""
		get_effort_config(self.effort)
		if self.max_iterations is not None and self.max_iterations < 1:
			raise ConfigError(f"max_iterations must be >= 1, got {self.max_iterations}")


def _to_bool(value: Any, key: str) -> bool:
	if isinstance(value, bool):
		return value
	normalized = str(value).strip().lower()
	if normalized in {"1", "true", "yes", "on"}:
		return True
	if normalized in {"0", "false", "no", "off"}:
		return False
	raise ConfigError(f"{key}: expected a boolean, got {value!r}")


def _to_positive_int(value: Any, key: str) -> int:
	if isinstance(value, bool):
		raise ConfigError(f"{key}: expected an integer, got {value!r}")
	try:
		parsed = int(value)
	except (TypeError, ValueError):
		raise ConfigError(f"{key}: expected an integer, got {value!r}") from None
	if parsed < 1:
		raise ConfigError(f"{key}: must be >= 1, got {parsed}")
	return parsed


def _set_reasoning_value(config: Config, key: str, value: Any) -> None:
	"""Coerce and assign one reasoning setting."""
	if key == "effort":
		effort = str(value).strip().lower()
		get_effort_config(effort)
		config.effort = effort
	elif key == "max_iterations":
		config.max_iterations = _to_positive_int(value, key)
	elif key in ("enable_reflection", "enable_planning"):
		setattr(config, key, _to_bool(value, key))
	elif key == "log_level":
		config.log_level = str(value).strip().upper()


_REASONING_KEYS = {"effort", "max_iterations", "enable_reflection", "enable_planning", "log_level"}


def _apply_env_overrides(config: Config) -> Config:
	"""Apply AGENT_REASONER_* environment variable overrides."""
	path_map = {
		"AGENT_REASONER_CONFIG_DIR": "config_dir",
		"AGENT_REASONER_DATA_DIR": "data_dir",
	}
	for env_key, attr in path_map.items():
		val = os.getenv(env_key)
		if val:
			setattr(config, attr, Path(val))

	for key in _REASONING_KEYS:
		val = os.getenv(f"AGENT_REASONER_{key.upper()}")
		if val:
			_set_reasoning_value(config, key, val)

	# Recompute derived paths after overrides
	config.__post_init__()
	return config


def _apply_toml(config: Config) -> Config:
	"""Apply config.toml overrides if file exists."""
	toml_path = config.config_dir / "config.toml"
	if not toml_path.exists():
		return config

	with open(toml_path, "rb") as f:
		try:
			data = tomllib.load(f)
		except tomllib.TOMLDecodeError as e:
			raise ConfigError(f"{toml_path}: {e}") from e

	path_fields = {"data_dir"}
	for key, val in data.items():
		if key in path_fields:
			setattr(config, key, Path(os.path.expanduser(val)))
		elif key in _REASONING_KEYS:
			_set_reasoning_value(config, key, val)

	# Recompute derived paths after toml overrides
	config.__post_init__()
	return config


def load_config() -> Config:
	"""Load config with precedence: env vars > config.toml > defaults."""
	config = Config()
	# config_dir itself may come from the environment; resolve it before reading toml
	env_config_dir = os.getenv("AGENT_REASONER_CONFIG_DIR")
	if env_config_dir:
		config.config_dir = Path(env_config_dir)
	config = _apply_toml(config)
	config = _apply_env_overrides(config)
	config.validate()
	config.ensure_dirs()
	return config


# Singleton
_config: Config | None = None


def get_config() -> Config:
	"""Get or create the global config instance."""
	global _config
	if _config is None:
		_config = load_config()
	return _config
