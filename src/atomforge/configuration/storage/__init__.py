# src/atomforge/configuration/storage/__init__.py
"""Storage configurations for Atomforge."""

from atomforge.configuration.storage.local import LocalStorage

__all__ = ["LocalStorage"]
