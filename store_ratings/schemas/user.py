from datetime import datetime
from pydantic import BaseModel, ConfigDict
from store_ratings.db.enums import Role
from store_ratings.schemas.common import Address, Email, Name, Pagination, Password

class UserCreate(BaseModel):
    name: Name
    email: Email
    password: Password
    address: Address = ""
    role: Role = Role.USER

class UserUpdate(BaseModel):
    name: Name | None = None
    email: Email | None = None
    address: Address | None = None
    role: Role | None = None

class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    address: str
    role: Role
    created_at: datetime
    average_rating: float | None = None

class UserList(BaseModel):
    items: list[UserRead]
    pagination: Pagination

class UserMutationResponse(BaseModel):
    message: str
    user: UserRead
