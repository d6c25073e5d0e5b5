"""Core: config, exception handlers, and application bootstrap.

Single place for settings and app wiring helpers.
"""

from caseflow.core.config import Settings, get_settings

__all__ = ["Settings", "get_settings"]
