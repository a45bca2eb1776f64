import logging

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studycards.core.database import get_db
from studycards.core.errors import InternalError, InvalidArgumentError, UnauthenticatedError
from studycards.core.security import (
    create_access_token,
    get_user_by_email,
    hash_password,
    verify_password,
)
from studycards.core.utils import generate_uuid
from studycards.models.user import User
from studycards.schemas.common import Envelope
from studycards.schemas.user import Token, UserCreate, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()

DUPLICATE_EMAIL = "This email address is already registered"


@router.post("/register", response_model=Envelope[UserResponse], response_model_exclude_none=True)
async def register_user(user: UserCreate, db: AsyncSession = Depends(get_db)):
    email = user.email.strip().lower()
    existing = await get_user_by_email(email, db)
    if existing:
        raise InvalidArgumentError(DUPLICATE_EMAIL)
    new_user = User(
        id=generate_uuid(),
        email=email,
        password=hash_password(user.password),
    )
    db.add(new_user)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        # another registration may have claimed the email after the check above
        if await get_user_by_email(email, db):
            logger.info("Duplicate registration for %s caught by constraint", email)
            raise InvalidArgumentError(DUPLICATE_EMAIL) from exc
        logger.error("Failed to create account: %s", exc, exc_info=True)
        raise InternalError("Failed to create account") from exc
    except SQLAlchemyError as exc:
        logger.error("Failed to create account: %s", exc, exc_info=True)
        await db.rollback()
        raise InternalError("Failed to create account") from exc
    logger.info("Registered user %s", new_user.id)
    return {"success": True, "data": {"id": new_user.id, "email": new_user.email}}


@router.post("/login", response_model=Token)
async def login_user(form_data: OAuth2PasswordRequestForm = Depends(), db: AsyncSession = Depends(get_db)):
    user = await get_user_by_email(form_data.username.strip().lower(), db)
    if not user or not verify_password(form_data.password, user.password):
        raise UnauthenticatedError("Invalid email or password")
    access_token = create_access_token(user.id)
    return {"access_token": access_token, "token_type": "bearer"}
