"""OpenAI-compatible chat-completions family.

- ``payload``: message/content-part helpers
- ``family``: :class:`OpenAIStyleFamily`, shared by DeepSeek, OpenAI and Qwen
"""

from .family import OpenAIStyleFamily
from .payload import build_messages, turn_content

__all__ = [
    "OpenAIStyleFamily",
    "build_messages",
    "turn_content",
]
