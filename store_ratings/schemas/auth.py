from pydantic import BaseModel

from store_ratings.schemas.common import Address, Email, Name, Password
from store_ratings.schemas.user import UserRead


class RegisterRequest(BaseModel):
    name: Name
    email: Email
    password: Password
    address: Address = ""


class LoginRequest(BaseModel):
    email: Email
    password: str


class PasswordUpdateRequest(BaseModel):
    current_password: str
    new_password: Password


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
