from .parameters import ModelParameters, GlobalModelParameters, GlobalParameters
from .conversation import (
    TagRef,
    ConversationCreate,
    ConversationUpdate,
    TagRead,
    ProviderRead,
    ProviderImage,
    LanguageModelRead,
    ModelSummary,
    UserRead,
    MessageRead,
    ConversationRead,
    ConversationWithTags,
    ConversationSummary,
    ConversationDetail,
    CountResult,
)
from .response import ServiceResponse

__all__ = [
    "ModelParameters",
    "GlobalModelParameters",
    "GlobalParameters",
    "TagRef",
    "ConversationCreate",
    "ConversationUpdate",
    "TagRead",
    "ProviderRead",
    "ProviderImage",
    "LanguageModelRead",
    "ModelSummary",
    "UserRead",
    "MessageRead",
    "ConversationRead",
    "ConversationWithTags",
    "ConversationSummary",
    "ConversationDetail",
    "CountResult",
    "ServiceResponse",
]
