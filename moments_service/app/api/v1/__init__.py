from fastapi import APIRouter

from .auth import router as auth_router
from .instants import router as instants_router
from .profiles import router as profiles_router
from .wallet import router as wallet_router

api_router = APIRouter()
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(
    instants_router
)  # prefix는 router 파일 내부에서 정의되어 있음 (/instants)
api_router.include_router(profiles_router, tags=["profiles"])
api_router.include_router(wallet_router)
