# src/atomforge/configuration/providers/__init__.py
"""Provider configurations for Atomforge."""

from atomforge.configuration.providers.litellm import LiteLLMProvider

__all__ = ["LiteLLMProvider"]
