"""Importer configuration loaded from YAML."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .exceptions import ConfigurationError
from .models import SampleFormat
from .validators import DEFAULT_MAX_STRING_LENGTH

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "importer.yaml"


@dataclass
class ImporterConfig:
    """Settings for one import run."""
    default_sample_format: SampleFormat = SampleFormat.FLOAT
    max_string_length: int = DEFAULT_MAX_STRING_LENGTH
    snapto_tokens: List[str] = field(default_factory=lambda: ["on"])
    use_fast_paths: bool = True
    header_probe_bytes: int = 256

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImporterConfig":
        """Create from the ``importer`` section of a config file."""
        defaults = cls()
        try:
            sample_format = SampleFormat.from_name(
                data.get("default_sample_format", "float")
            )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        max_string_length = data.get("max_string_length", defaults.max_string_length)
        if not isinstance(max_string_length, int) or max_string_length <= 0:
            raise ConfigurationError(
                f"max_string_length must be a positive integer, got {max_string_length!r}"
            )

        tokens = data.get("snapto_tokens", defaults.snapto_tokens)
        if isinstance(tokens, str):
            tokens = [tokens]

        return cls(
            default_sample_format=sample_format,
            max_string_length=max_string_length,
            snapto_tokens=[str(t) for t in tokens],
            use_fast_paths=bool(data.get("use_fast_paths", defaults.use_fast_paths)),
            header_probe_bytes=int(data.get("header_probe_bytes", defaults.header_probe_bytes)),
        )


def load_config(config_path: Optional[Path] = None) -> ImporterConfig:
    """
    Load importer configuration.

    Args:
        config_path: YAML file; defaults to config/importer.yaml

    Returns:
        ImporterConfig, with defaults for any missing key
    """
    config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        logger.warning(f"Config file not found: {config_path}, using defaults")
        return ImporterConfig()

    logger.info(f"Loading importer config from {config_path}")
    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            config_dict = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML: {e}", str(config_path)) from e

    if not isinstance(config_dict, dict):
        raise ConfigurationError("Config root must be a mapping", str(config_path))

    return ImporterConfig.from_dict(config_dict.get("importer", {}) or {})
