"""
Validator configuration.

Controls which checks run and how strict they are. Defaults match a typical
Hugo-style blog: title, slug and date are required, everything else optional.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import List, Optional, Union
import logging

import yaml

from ...content.post import RECOGNIZED_KEYS

logger = logging.getLogger(__name__)


@dataclass
class ValidatorConfig:
    """Settings for PostValidator."""

    required_keys: List[str] = field(default_factory=lambda: ["title", "slug", "date"])
    allowed_keys: Optional[List[str]] = None  # None allows any key
    require_timezone: bool = True
    require_url_safe_slug: bool = True  # Warn on slugs outside [a-z0-9-]
    check_image_exists: bool = True
    max_description_length: Optional[int] = None

    def validate(self) -> None:
        """Validate configuration."""
        unknown = [k for k in self.required_keys if k not in RECOGNIZED_KEYS]
        if unknown:
            raise ValueError(f"required_keys contains unrecognized keys: {unknown}")
        for key in ("title", "slug", "date"):
            if key not in self.required_keys:
                raise ValueError(f"'{key}' cannot be made optional")
        if self.allowed_keys is not None:
            missing = [k for k in self.required_keys if k not in self.allowed_keys]
            if missing:
                raise ValueError(f"allowed_keys must include the required keys: {missing}")
        if self.max_description_length is not None and self.max_description_length <= 0:
            raise ValueError("max_description_length must be positive")


def load_validator_config(config_path: Union[str, Path]) -> ValidatorConfig:
    """
    Load validator configuration from a YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        ValidatorConfig instance
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    known = {f.name for f in fields(ValidatorConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning(f"Ignoring unknown config keys in {path}: {unknown}")

    config = ValidatorConfig(**{k: v for k, v in data.items() if k in known})
    config.validate()
    logger.debug(f"Loaded validator config from {path}")
    return config
