from pydantic import Field, EmailStr, HttpUrl

from constants import NAME_MAX_LENGTH, PASSWORD_MIN_LENGTH
from schemas.baseschema import CamelSchema, UTCDateTime


class UserEmailSchema(CamelSchema):
    email: EmailStr


class UserPasswordSchema(CamelSchema):
    password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=100)


class UserCredsSchema(UserEmailSchema):
    # any non empty password may be tried, only the hash decides
    password: str = Field(min_length=1)


class UserNameSchema(CamelSchema):
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)


class UserSchema(UserEmailSchema, UserPasswordSchema, UserNameSchema):
    pass


class UpdateProfileSchema(CamelSchema):
    name: str | None = Field(None, min_length=2, max_length=NAME_MAX_LENGTH)
    avatar: HttpUrl | None = None


class ChangePasswordSchema(CamelSchema):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=PASSWORD_MIN_LENGTH, max_length=100)


class DeleteAccountSchema(CamelSchema):
    password: str = Field(min_length=1)


class UserOutSchema(CamelSchema):
    id: int
    name: str
    email: str
    avatar: str
    is_active: bool
    last_login: UTCDateTime | None
    created_at: UTCDateTime
