import logging

from fastapi import Request, APIRouter, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from limiter import limiter
from auth import authentication, currentUserDep, hasher
from database import sessionDep
from errors import AuthenticationError, ConflictError, InternalError
from models.usermodel import UserModel, utcnow
from schemas.baseschema import envelope
from schemas.userschema import UserCredsSchema, UserOutSchema, UserSchema
from constants import limit_value_api, SCOPE_API

logger = logging.getLogger(__name__)

router_auth = APIRouter(prefix="/auth", tags=["Authentication"])


@router_auth.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    description="Accepts user object. Creates the user and returns it with a bearer token if the email is not taken",
    summary="Register user",
)
@limiter.shared_limit(limit_value_api, SCOPE_API)
async def register(newUser: UserSchema, request: Request, session: sessionDep):
    query = select(UserModel).where(UserModel.email == newUser.email)
    result = await session.execute(query)
    user = result.scalar_one_or_none()

    if user is not None:
        logger.warning("Registration attempt with existing email email=%s", newUser.email)
        raise ConflictError("User already exists with this email")

    new_user = UserModel(
        name=newUser.name,
        email=newUser.email,
        password=hasher.hash(newUser.password),
    )
    try:
        session.add(new_user)
        await session.commit()
    except IntegrityError as e:
        # lost a race against another registration with the same email
        await session.rollback()
        raise ConflictError("User already exists with this email") from e
    except SQLAlchemyError as e:
        raise InternalError("Server error during registration") from e

    token = authentication.issue_token(new_user.id, new_user.email)

    logger.info("User registered user_id=%s email=%s", new_user.id, new_user.email)

    return envelope(
        {"user": UserOutSchema.serialize(new_user), "token": token},
        "User registered successfully",
    )


@router_auth.post(
    "/login",
    description="Accepts creds object. Returns the user and a bearer token if creds are valid and the account is active",
    summary="Login user",
)
@limiter.shared_limit(limit_value_api, SCOPE_API)
async def login(creds: UserCredsSchema, request: Request, session: sessionDep):
    query = select(UserModel).where(UserModel.email == creds.email)
    result = await session.execute(query)
    user = result.scalar_one_or_none()

    if user is None:
        logger.warning("Login attempt with non-existent email email=%s", creds.email)
        raise AuthenticationError("Invalid credentials")

    if not user.is_active:
        logger.warning("Login attempt with inactive account user_id=%s", user.id)
        raise AuthenticationError("Account is inactive")

    if not hasher.verify(creds.password, user.password):
        logger.warning("Login attempt with invalid password user_id=%s", user.id)
        raise AuthenticationError("Invalid credentials")

    try:
        user.last_login = utcnow()
        await session.commit()
    except SQLAlchemyError as e:
        raise InternalError("Server error during login") from e

    token = authentication.issue_token(user.id, user.email)

    logger.info("User logged in user_id=%s email=%s", user.id, user.email)

    return envelope({"user": UserOutSchema.serialize(user), "token": token}, "Login successful")


@router_auth.get(
    "/me",
    description="Accepts bearer token. Returns the authenticated user",
    summary="Get current user",
)
@limiter.shared_limit(limit_value_api, SCOPE_API)
async def get_me(request: Request, user: currentUserDep):
    return envelope({"user": UserOutSchema.serialize(user)})
