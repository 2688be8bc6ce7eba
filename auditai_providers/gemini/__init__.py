"""Gemini (primary multimodal) provider family."""

from .family import GeminiFamily

__all__ = ["GeminiFamily"]
