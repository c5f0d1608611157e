"""Provider configurations for Docent."""

from docent.configuration.providers.litellm import LiteLLMProvider

__all__ = ["LiteLLMProvider"]
