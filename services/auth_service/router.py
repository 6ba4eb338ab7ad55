from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config.database import get_db
from shared.security import LOGIN_RATE_LIMIT, limiter, rate_limit_exempt

from .repository import InMemoryUserRepository, SqlUserRepository
from .schemas import UserCreate, UserEnvelope, UserLogin
from .service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_auth_service(request: Request, db: Optional[AsyncSession] = Depends(get_db)) -> AuthService:
    repo, fallback = request.app.state.stores.repositories(db, SqlUserRepository, InMemoryUserRepository)
    return AuthService(repo, fallback)


@router.post(
    "/register",
    response_model=UserEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def register(payload: UserCreate, service: AuthService = Depends(get_auth_service)):
    return {"user": await service.register(payload)}


@router.post(
    "/login",
    response_model=UserEnvelope,
    summary="Check credentials and return the user",
)
@limiter.limit(LOGIN_RATE_LIMIT, exempt_when=rate_limit_exempt)
async def login(
    request: Request,  # REQUIRED: slowapi needs this to check IP/Headers
    payload: UserLogin,
    service: AuthService = Depends(get_auth_service),
):
    return {"user": await service.login(payload)}


@router.get("/user/{user_id}", response_model=UserEnvelope, summary="Get a user's profile")
async def get_user(user_id: str, service: AuthService = Depends(get_auth_service)):
    return {"user": await service.get_user(user_id)}
