from .message_list import MessageList, MessageItem
from .parameters_modal import ParametersModal

__all__ = ["MessageList", "MessageItem", "ParametersModal"]
