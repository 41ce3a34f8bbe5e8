import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header
from pymongo.errors import DuplicateKeyError

from payproof.config import settings
from payproof.database import Database, get_db
from payproof.errors import EmailAlreadyRegistered, Unauthenticated
from payproof.models.user import (
    Identity, LoginRequest, RegisterRequest, TokenResponse, User, UserPublic, normalize_email
)
from payproof.repositories.user import UserRepository
from payproof.security import TokenService, hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

def get_token_service() -> TokenService:
    return TokenService(settings.SECRET_KEY, settings.JWT_ALGORITHM, settings.ACCESS_TOKEN_EXPIRE_MINUTES)

def get_users(database: Database = Depends(get_db)) -> UserRepository:
    return database.users

async def get_current_identity(
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service)
) -> Identity:
    """Resolve the caller from the Authorization header, with or without 'Bearer '."""
    return tokens.verify(authorization)

@router.post("/register", response_model=UserPublic, status_code=201)
async def register(body: RegisterRequest, users: UserRepository = Depends(get_users)):
    email = normalize_email(body.email)
    if await users.get_by_email(email):
        raise EmailAlreadyRegistered()

    user = User(name=body.name.strip(), email=email, password_hash=hash_password(body.password))
    try:
        await users.create(user)
    except DuplicateKeyError:
        # concurrent registration of the same email
        raise EmailAlreadyRegistered()
    logger.info(f"Registered user {email}")
    return user.public()

@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    users: UserRepository = Depends(get_users),
    tokens: TokenService = Depends(get_token_service)
):
    user = await users.get_by_email(body.email)
    if not user or not verify_password(body.password, user.password_hash):
        logger.warning(f"Failed login for {normalize_email(body.email)}")
        raise Unauthenticated("Invalid email or password")

    return TokenResponse(token=tokens.issue(user.id, user.email), user=user.public())

@router.get("/me", response_model=Identity)
async def me(current_user: Identity = Depends(get_current_identity)):
    return current_user
