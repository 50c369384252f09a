from fastapi import APIRouter

from src.briefs.router import router as briefs_router
from src.content.router import router as content_router
from src.llm.router import router as usage_router

api_router = APIRouter()

api_router.include_router(briefs_router)
api_router.include_router(content_router)
api_router.include_router(usage_router)
