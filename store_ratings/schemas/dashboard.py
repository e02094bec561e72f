from datetime import datetime
from pydantic import BaseModel
from store_ratings.db.enums import Role
from store_ratings.schemas.rating import RaterSummary

class DashboardStats(BaseModel):
    total_users: int
    total_stores: int
    total_ratings: int

class RecentUser(BaseModel):
    id: int
    name: str
    email: str
    role: Role
    created_at: datetime

class StoreSnapshot(BaseModel):
    id: int
    name: str
    email: str
    owner_name: str
    average_rating: float
    total_ratings: int
    created_at: datetime

class RecentRating(BaseModel):
    id: int
    value: int
    user_name: str
    user_email: str
    store_id: int
    store_name: str
    created_at: datetime

class RankedStore(BaseModel):
    id: int
    name: str
    owner_name: str
    average_rating: float
    total_ratings: int

class AdminDashboard(BaseModel):
    stats: DashboardStats
    recent_users: list[RecentUser]
    recent_stores: list[StoreSnapshot]
    recent_ratings: list[RecentRating]
    users_by_role: dict[Role, int]
    top_rated_stores: list[RankedStore]

class OwnedStore(BaseModel):
    id: int
    name: str
    email: str
    address: str

class OwnerRecentRating(BaseModel):
    id: int
    value: int
    user: RaterSummary
    created_at: datetime

class OwnerStoreBreakdown(BaseModel):
    store: OwnedStore
    average_rating: float
    total_ratings: int
    rating_distribution: dict[int, int]
    recent_ratings: list[OwnerRecentRating]

class OwnerSummaryStats(BaseModel):
    total_stores: int
    total_ratings: int
    overall_average_rating: float

class OwnerDashboard(BaseModel):
    stores: list[OwnerStoreBreakdown]
    summary: OwnerSummaryStats
