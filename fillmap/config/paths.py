"""Path configuration for the fillmap package.

Centralizes filesystem locations for config and logs.
"""
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_DIR = PROJECT_ROOT / "config"
DEFAULT_CONFIG_FILE = CONFIG_DIR / "fillmap.yaml"
LOG_DIR = PROJECT_ROOT / "logs"
