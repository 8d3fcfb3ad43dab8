"""
Repository layer: data access on top of an AsyncSession.

Usage:
    from wizeprompt.repositories import ConversationRepository, UserRepository
"""

from .base_repository import BaseRepository
from .user_repository import UserRepository
from .conversation_repository import ConversationRepository
from .message_repository import MessageRepository
from .tag_repository import TagRepository
from .language_model_repository import LanguageModelRepository, ProviderRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ConversationRepository",
    "MessageRepository",
    "TagRepository",
    "LanguageModelRepository",
    "ProviderRepository",
]
