from datetime import datetime
from pydantic import BaseModel, ConfigDict
from store_ratings.schemas.common import Address, Email, Name, Pagination, RecordId

class StoreCreate(BaseModel):
    name: Name
    email: Email
    address: Address = ""
    owner_id: RecordId

class StoreUpdate(BaseModel):
    name: Name | None = None
    email: Email | None = None
    address: Address | None = None
    owner_id: RecordId | None = None

class OwnerSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str

class StoreRead(BaseModel):
    id: int
    name: str
    email: str
    address: str
    owner: OwnerSummary
    average_rating: float
    total_ratings: int
    user_rating: int | None = None
    created_at: datetime

class StoreList(BaseModel):
    items: list[StoreRead]
    pagination: Pagination

class StoreMutationResponse(BaseModel):
    message: str
    store: StoreRead
