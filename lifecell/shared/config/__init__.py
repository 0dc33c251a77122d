"""
Shared Config Module
====================

Packaged configuration settings.

Structure:
- settings/: YAML configuration files (defaults, project, user)
"""

from pathlib import Path

SETTINGS_DIR = Path(__file__).resolve().parent / "settings"

__all__ = ["SETTINGS_DIR"]
