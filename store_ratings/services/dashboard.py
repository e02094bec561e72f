from sqlalchemy.orm import Session

from store_ratings.db.repositories import ratings as ratings_repo
from store_ratings.db.repositories import stores as stores_repo
from store_ratings.db.repositories import users as users_repo
from store_ratings.schemas.dashboard import (
    AdminDashboard,
    DashboardStats,
    OwnedStore,
    OwnerDashboard,
    OwnerRecentRating,
    OwnerStoreBreakdown,
    OwnerSummaryStats,
    RankedStore,
    RecentRating,
    RecentUser,
    StoreSnapshot,
)
from store_ratings.schemas.rating import RaterSummary
from store_ratings.services import aggregation
from store_ratings.services.identity import Principal
from store_ratings.services.permissions import Action, require

RECENT_USERS_LIMIT = 5
RECENT_STORES_LIMIT = 5
RECENT_RATINGS_LIMIT = 10
OWNER_RECENT_RATINGS_LIMIT = 10


def _top_rated_stores(db: Session) -> list[RankedStore]:
    values_by_store = ratings_repo.get_values_for_all_stores(db)
    ranked = aggregation.rank_stores(
        aggregation.aggregate_store(store_id, values)
        for store_id, values in values_by_store.items()
    )
    stores = stores_repo.get_stores_by_ids(db, [entry.store_id for entry in ranked])

    return [
        RankedStore(
            id=entry.store_id,
            name=stores[entry.store_id].name,
            owner_name=stores[entry.store_id].owner.name,
            average_rating=aggregation.round_rating(entry.average),
            total_ratings=entry.count,
        )
        for entry in ranked
    ]


def build_admin_dashboard(db: Session, principal: Principal) -> AdminDashboard:
    require(principal, Action.VIEW_ADMIN_DASHBOARD)

    recent_stores = stores_repo.get_recent_stores(db, RECENT_STORES_LIMIT)
    recent_store_values = ratings_repo.get_values_by_store_ids(db, [store.id for store in recent_stores])

    return AdminDashboard(
        stats=DashboardStats(
            total_users=users_repo.count_users(db),
            total_stores=stores_repo.count_stores(db),
            total_ratings=ratings_repo.count_ratings(db),
        ),
        recent_users=[
            RecentUser(
                id=user.id,
                name=user.name,
                email=user.email,
                role=user.role,
                created_at=user.created_at,
            )
            for user in users_repo.get_recent_users(db, RECENT_USERS_LIMIT)
        ],
        recent_stores=[
            StoreSnapshot(
                id=store.id,
                name=store.name,
                email=store.email,
                owner_name=store.owner.name,
                average_rating=aggregation.average(recent_store_values[store.id]),
                total_ratings=len(recent_store_values[store.id]),
                created_at=store.created_at,
            )
            for store in recent_stores
        ],
        recent_ratings=[
            RecentRating(
                id=rating.id,
                value=rating.value,
                user_name=rating.user.name,
                user_email=rating.user.email,
                store_id=rating.store_id,
                store_name=rating.store.name,
                created_at=rating.created_at,
            )
            for rating in ratings_repo.get_recent_ratings(db, RECENT_RATINGS_LIMIT)
        ],
        users_by_role=users_repo.count_users_by_role(db),
        top_rated_stores=_top_rated_stores(db),
    )


def build_owner_dashboard(db: Session, principal: Principal) -> OwnerDashboard:
    require(principal, Action.VIEW_OWNER_DASHBOARD)

    stores = stores_repo.get_stores_for_owner(db, principal.id)
    ratings_by_store = ratings_repo.get_ratings_for_stores(db, [store.id for store in stores])

    breakdowns = []
    aggregates = []
    for store in stores:
        ratings = ratings_by_store[store.id]
        values = [rating.value for rating in ratings]
        aggregates.append(aggregation.aggregate_store(store.id, values))

        breakdowns.append(
            OwnerStoreBreakdown(
                store=OwnedStore(
                    id=store.id,
                    name=store.name,
                    email=store.email,
                    address=store.address,
                ),
                average_rating=aggregation.average(values),
                total_ratings=len(values),
                rating_distribution=aggregation.distribution(values),
                recent_ratings=[
                    OwnerRecentRating(
                        id=rating.id,
                        value=rating.value,
                        user=RaterSummary.model_validate(rating.user),
                        created_at=rating.created_at,
                    )
                    for rating in ratings[:OWNER_RECENT_RATINGS_LIMIT]
                ],
            )
        )

    return OwnerDashboard(
        stores=breakdowns,
        summary=OwnerSummaryStats(
            total_stores=len(stores),
            total_ratings=sum(entry.count for entry in aggregates),
            overall_average_rating=aggregation.round_rating(
                aggregation.weighted_owner_average(aggregates)
            ),
        ),
    )
