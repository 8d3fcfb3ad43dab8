from . import conversation_service, user_service

__all__ = ["conversation_service", "user_service"]
