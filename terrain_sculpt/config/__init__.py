"""
Configuration for terrain sculpting sessions.
"""

from .config import Settings, settings
from .session_settings import SessionConfig, validate_divisions, validate_strength

__all__ = ['Settings', 'settings', 'SessionConfig', 'validate_divisions', 'validate_strength']
