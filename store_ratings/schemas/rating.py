from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from store_ratings.schemas.common import Pagination, RecordId

class RatingSubmit(BaseModel):
    store_id: RecordId
    value: int = Field(..., ge=1, le=5)

class RaterSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str

class RatedStoreSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str

class RatingRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    value: int
    user_id: int
    store_id: int
    created_at: datetime
    updated_at: datetime

class StoreRatingRead(RatingRead):
    user: RaterSummary

class UserRatingRead(RatingRead):
    store: RatedStoreSummary

class RatingSubmitResponse(BaseModel):
    message: str
    rating: RatingRead

class UserRatingList(BaseModel):
    items: list[UserRatingRead]

class StoreRatingList(BaseModel):
    items: list[StoreRatingRead]
    pagination: Pagination
    average_rating: float
    total_ratings: int
