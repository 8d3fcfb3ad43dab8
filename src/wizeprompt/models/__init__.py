r"""
Centralized access to all database models.

    from wizeprompt.models import User, Conversation, Message, MessageRole
"""

from .user import User
from .provider import Provider
from .language_model import LanguageModel
from .tag import Tag, conversation_tags
from .conversation import Conversation
from .message import Message, MessageRole

__all__ = [
    "User",
    "Provider",
    "LanguageModel",
    "Tag",
    "conversation_tags",
    "Conversation",
    "Message",
    "MessageRole",
]
