"""Utility functions for the Add-On Releaser."""

from addon_releaser.core.utils.logging import StructuredJSONFormatter, configure_logging

__all__ = [
    "StructuredJSONFormatter",
    "configure_logging",
]
