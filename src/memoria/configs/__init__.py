"""Packaged configuration files (models.yaml)."""

from pathlib import Path

CONFIG_DIR = Path(__file__).parent
MODELS_CONFIG = CONFIG_DIR / "models.yaml"

__all__ = ["CONFIG_DIR", "MODELS_CONFIG"]
