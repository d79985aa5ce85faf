"""
Configuration Loader for chirpsearch

Centralized configuration management. Engine parameters are read from YAML
files rather than hardcoded at call sites.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

# Packaged configuration directory (chirpsearch/configs)
DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent / "configs"


class ConfigLoader:
    """
    Configuration loader with hierarchical override:

    1. Default config (required)
    2. User config (optional) - overrides defaults
    3. Experiment config (optional) - overrides user/defaults
    4. Environment variables (optional) - override everything

    Config arguments are either names of YAML files in ``config_dir``
    (without the ``.yaml`` suffix) or paths to YAML files.
    """

    # Environment variable -> (section, key, type)
    ENV_MAPPINGS = {
        'CHIRPSEARCH_SNR_THRESHOLD': ('search', 'snr_threshold', float),
        'CHIRPSEARCH_MAX_WORKERS': ('search', 'max_workers', int),
        'CHIRPSEARCH_BACKEND': ('search', 'backend', str),
        'CHIRPSEARCH_SHOW_PROGRESS': ('search', 'show_progress', bool),
        'CHIRPSEARCH_HIGHPASS_CUTOFF_HZ': ('preprocessing', 'highpass_cutoff_hz', float),
        'CHIRPSEARCH_MIN_SAMPLES': ('preprocessing', 'min_samples', int),
        'CHIRPSEARCH_LOG_LEVEL': ('logging', 'level', str),
        'CHIRPSEARCH_LOG_FILE': ('logging', 'log_file', str),
    }

    REQUIRED_SECTIONS = ('preprocessing', 'waveform', 'search', 'physics')

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        self.config_dir = Path(config_dir) if config_dir is not None else DEFAULT_CONFIG_DIR

    def _resolve(self, name_or_path: Union[str, Path]) -> Path:
        path = Path(name_or_path)
        if path.suffix in ('.yaml', '.yml') or path.is_absolute() or path.exists():
            return path
        return self.config_dir / f"{name_or_path}.yaml"

    def load_config(self,
                    config_name: Union[str, Path] = "default",
                    user_config: Optional[Union[str, Path]] = None,
                    experiment_config: Optional[Union[str, Path]] = None,
                    use_env_override: bool = True) -> Dict[str, Any]:
        """
        Load configuration with hierarchical overrides.

        Args:
            config_name: Default config name or path
            user_config: Optional user config name or path
            experiment_config: Optional experiment config name or path
            use_env_override: Whether to apply environment variable overrides

        Returns:
            Merged configuration dictionary
        """
        default_path = self._resolve(config_name)
        config = self._load_yaml_file(default_path, required=True)
        logger.debug(f"Loaded default config: {default_path}")

        for label, name in (("user", user_config), ("experiment", experiment_config)):
            if not name:
                continue
            path = self._resolve(name)
            override = self._load_yaml_file(path, required=False)
            if override:
                config = self._deep_merge(config, override)
                logger.info(f"Applied {label} config: {path}")

        if use_env_override:
            config = self._apply_env_overrides(config)

        self._validate_config(config)
        return config

    def _load_yaml_file(self, path: Path, required: bool = True) -> Optional[Dict[str, Any]]:
        """Load YAML file; a missing optional file yields None."""
        if not path.exists():
            if required:
                raise FileNotFoundError(f"Required config file not found: {path}")
            logger.warning(f"Optional config file not found: {path}")
            return None

        try:
            with open(path, 'r') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error in {path}: {e}")
            raise

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ValueError(f"Config file {path} must contain a mapping, got {type(config).__name__}")

        logger.debug(f"Loaded YAML file: {path} ({len(config)} top-level keys)")
        return config

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if (key in result and
                    isinstance(result[key], dict) and
                    isinstance(value, dict)):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply CHIRPSEARCH_* environment variable overrides."""
        for env_var, (section, key, kind) in self.ENV_MAPPINGS.items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue

            if kind is bool:
                value = env_value.lower() in ('true', '1', 'yes')
            else:
                try:
                    value = kind(env_value)
                except ValueError:
                    raise ValueError(f"Invalid value for {env_var}: {env_value!r}")

            section_dict = dict(config.get(section) or {})
            section_dict[key] = value
            config = {**config, section: section_dict}
            logger.debug(f"Environment override: {env_var}={value}")

        return config

    def _validate_config(self, config: Dict[str, Any]):
        """Validate sections and value ranges."""
        for section in self.REQUIRED_SECTIONS:
            if section not in config:
                raise ValueError(f"Missing required config section: {section}")

        validations = [
            ('preprocessing', 'min_samples', int, lambda x: x >= 2),
            ('preprocessing', 'highpass_cutoff_hz', (int, float), lambda x: x > 0),
            ('search', 'snr_threshold', (int, float), lambda x: x >= 0),
            ('search', 'mass_step', (int, float), lambda x: x > 0),
            ('search', 'max_workers', int, lambda x: x >= 1),
            ('search', 'backend', str, lambda x: x in ('numpy', 'jax')),
        ]

        for section, key, expected_type, validator in validations:
            try:
                value = config[section][key]
            except (KeyError, TypeError):
                logger.debug(f"Optional config key not found: {section}.{key}")
                continue
            if not isinstance(value, expected_type) or isinstance(value, bool):
                raise ValueError(
                    f"Config {section}.{key} should be {expected_type}, got {type(value).__name__}"
                )
            if not validator(value):
                raise ValueError(f"Invalid value for {section}.{key}: {value}")

    def get_value(self, config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
        """
        Get nested configuration value using dot notation.

        Args:
            config: Configuration dictionary
            key_path: Dot-separated key path (e.g., 'search.snr_threshold')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = config
        try:
            for key in key_path.split('.'):
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def save_config(self, config: Dict[str, Any], output_path: Union[str, Path]):
        """Save configuration to YAML file."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w') as f:
            yaml.dump(config, f, default_flow_style=False, indent=2, sort_keys=False)

        logger.info(f"Configuration saved to: {output_path}")


def load_config(config_name: Union[str, Path] = "default", **kwargs) -> Dict[str, Any]:
    """Convenience function to load configuration from the packaged config dir."""
    return ConfigLoader().load_config(config_name, **kwargs)
