from fastapi import APIRouter

from . import conversations, users

API_PREFIX = "/api/v1"


def get_api_router() -> APIRouter:
    api_router = APIRouter(prefix=API_PREFIX)
    api_router.include_router(users.router)
    api_router.include_router(conversations.router)
    return api_router
