import os
import yaml
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .exceptions import PhishcheckConfigError

CONFIG_ENV = "PHISHCHECK_CONFIG"
LOCAL_CONFIG_NAME = "phishcheck.config.yaml"

ENV_OVERRIDES = {
    "PHISHCHECK_TIMEOUT": "network.probe_timeout",
    "PHISHCHECK_PORT": "network.port",
    "PHISHCHECK_LOG_DIR": "logging.log_dir",
    "PHISHCHECK_LOG_LEVEL": "logging.level",
}

class Config:
    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ
        self.load()

    def load(self):
        """Loads configuration from available sources and applies overrides."""
        self.data = self._load_from_files()
        self._apply_env_overrides()

    def reload(self):
        self.load()

    def _default_config(self) -> Dict[str, Any]:
        """Returns the default baseline configuration."""
        return {
            "general": {
                "version": 1.0,
            },
            "network": {
                "probe_timeout": 8,
                "port": 443,
            },
            "logging": {
                "level": "WARNING",
                "log_dir": "./logs",
                "log_file": "phishcheck.log",
            },
            "reputation": {
                "api_key_env": "VIRUSTOTAL_API_KEY",
            },
        }

    def config_paths(self) -> List[Path]:
        # Lowest priority first: user < local < $PHISHCHECK_CONFIG
        paths = [
            Path.home() / ".phishcheck" / "config.yaml",
            Path.cwd() / LOCAL_CONFIG_NAME,
        ]
        if self.environ.get(CONFIG_ENV):
            paths.append(Path(self.environ[CONFIG_ENV]))
        return paths

    def _load_from_files(self) -> Dict[str, Any]:
        merged_config = self._default_config()
        for path in self.config_paths():
            if not path.is_file():
                continue
            try:
                with open(path, "r", encoding="utf-8") as f:
                    file_data = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                raise PhishcheckConfigError(f"Failed to load config from {path}: {e}")
            if isinstance(file_data, dict):
                self._deep_update(merged_config, file_data)
            elif file_data is not None:
                raise PhishcheckConfigError(f"Configuration file {path} must be a dictionary.")
        return merged_config

    def _deep_update(self, base_dict: Dict[str, Any], update_dict: Dict[str, Any]):
        """Recursively updates a dictionary."""
        for key, value in update_dict.items():
            if isinstance(value, dict) and key in base_dict and isinstance(base_dict[key], dict):
                self._deep_update(base_dict[key], value)
            else:
                base_dict[key] = value

    def _apply_env_overrides(self):
        for env_var, config_key in ENV_OVERRIDES.items():
            value = self.environ.get(env_var)
            if value is None or value == "":
                continue
            if config_key == "network.probe_timeout":
                value = self._convert(env_var, value, float)
            elif config_key == "network.port":
                value = self._convert(env_var, value, int)
            self.set(config_key, value)

    @staticmethod
    def _convert(env_var: str, value: str, kind):
        try:
            return kind(value)
        except ValueError:
            raise PhishcheckConfigError(f"{env_var} must be a number, got {value!r}")

    def get(self, key: str, default: Any = None) -> Any:
        """Gets a configuration value using dot-notation."""
        value = self.data
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default
        return value

    def set(self, key: str, value: Any):
        """Sets a configuration value using dot-notation."""
        parts = key.split(".")
        target = self.data
        for part in parts[:-1]:
            if part not in target or not isinstance(target[part], dict):
                target[part] = {}
            target = target[part]
        target[parts[-1]] = value

    @property
    def log_file(self) -> Path:
        return Path(self.get("logging.log_dir", "./logs")) / self.get("logging.log_file", "phishcheck.log")

    def reputation_api_key(self) -> Optional[str]:
        env_name = self.get("reputation.api_key_env")
        if not env_name:
            return None
        return self.environ.get(env_name)

    def to_yaml(self) -> str:
        """Returns the configuration as a YAML string."""
        return yaml.dump(self.data, default_flow_style=False)
