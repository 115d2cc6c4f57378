import logging

from fastapi import Request, APIRouter
from sqlalchemy.exc import SQLAlchemyError

from limiter import limiter
from auth import currentUserDep, hasher
from database import sessionDep
from errors import InternalError, ValidationError
from schemas.baseschema import envelope
from schemas.userschema import (
    ChangePasswordSchema,
    DeleteAccountSchema,
    UpdateProfileSchema,
    UserOutSchema,
)
from constants import limit_value_api, SCOPE_API

logger = logging.getLogger(__name__)

router_user = APIRouter(prefix="/user", tags=["User"])


@router_user.get(
    "/profile",
    description="Accepts bearer token. Returns the caller's profile",
    summary="Get profile",
)
@limiter.shared_limit(limit_value_api, SCOPE_API)
async def get_profile(request: Request, user: currentUserDep):
    logger.info("User profile retrieved user_id=%s", user.id)
    return envelope({"user": UserOutSchema.serialize(user)})


@router_user.put(
    "/profile",
    description="Accepts name and/or avatar url. Returns the updated profile",
    summary="Update profile",
)
@limiter.shared_limit(limit_value_api, SCOPE_API)
async def update_profile(
    updateProfile: UpdateProfileSchema,
    request: Request,
    session: sessionDep,
    user: currentUserDep,
):
    try:
        if updateProfile.name:
            user.name = updateProfile.name
        if updateProfile.avatar:
            user.avatar = str(updateProfile.avatar)
        await session.commit()
    except SQLAlchemyError as e:
        raise InternalError("Server error updating profile") from e

    logger.info("User profile updated user_id=%s", user.id)

    return envelope({"user": UserOutSchema.serialize(user)}, "Profile updated successfully")


@router_user.put(
    "/change-password",
    description="Accepts current and new passwords. Replaces the password if the current one matches",
    summary="Change password",
)
@limiter.shared_limit(limit_value_api, SCOPE_API)
async def change_password(
    changePassword: ChangePasswordSchema,
    request: Request,
    session: sessionDep,
    user: currentUserDep,
):
    if not hasher.verify(changePassword.current_password, user.password):
        logger.warning("Invalid current password provided user_id=%s", user.id)
        raise ValidationError("Current password is incorrect")

    try:
        user.password = hasher.hash(changePassword.new_password)
        await session.commit()
    except SQLAlchemyError as e:
        raise InternalError("Server error changing password") from e

    logger.info("Password changed user_id=%s", user.id)

    return envelope(message="Password changed successfully")


@router_user.delete(
    "/account",
    description="Accepts password. Deactivates the account, its notes are kept",
    summary="Delete account",
)
@limiter.shared_limit(limit_value_api, SCOPE_API)
async def delete_account(
    deleteAccount: DeleteAccountSchema,
    request: Request,
    session: sessionDep,
    user: currentUserDep,
):
    if not hasher.verify(deleteAccount.password, user.password):
        logger.warning("Invalid password provided for account deletion user_id=%s", user.id)
        raise ValidationError("Password is incorrect")

    try:
        user.is_active = False
        await session.commit()
    except SQLAlchemyError as e:
        raise InternalError("Server error deleting account") from e

    logger.info("User account deactivated user_id=%s", user.id)

    return envelope(message="Account deleted successfully")
