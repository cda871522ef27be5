"""
Configuration management.

Dataclass configuration loaded from YAML.
"""

from .validator import ValidatorConfig, load_validator_config

__all__ = ["ValidatorConfig", "load_validator_config"]
