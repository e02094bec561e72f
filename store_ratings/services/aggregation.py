from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

RATING_MIN = 1
RATING_MAX = 5
RATING_VALUES = tuple(range(RATING_MIN, RATING_MAX + 1))
TOP_STORES_LIMIT = 5


@dataclass(frozen=True)
class StoreAggregate:
    store_id: int
    average: float
    count: int


def round_rating(value: float) -> float:
    return round(value, 2)


def mean(values: Sequence[int]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def average(values: Sequence[int]) -> float:
    return round_rating(mean(values))


def distribution(values: Iterable[int]) -> dict[int, int]:
    counts = Counter(values)
    return {value: counts.get(value, 0) for value in RATING_VALUES}


def aggregate_store(store_id: int, values: Sequence[int]) -> StoreAggregate:
    return StoreAggregate(store_id=store_id, average=mean(values), count=len(values))


def rank_stores(stores: Iterable[StoreAggregate], limit: int = TOP_STORES_LIMIT) -> list[StoreAggregate]:
    rated = [store for store in stores if store.count > 0]
    # average desc, then count desc, then id asc so the order is total
    rated.sort(key=lambda store: (-store.average, -store.count, store.store_id))
    return rated[:limit]


def weighted_owner_average(per_store: Iterable[StoreAggregate]) -> float:
    total_count = 0
    weighted_sum = 0.0
    for store in per_store:
        weighted_sum += store.average * store.count
        total_count += store.count

    if total_count == 0:
        return 0.0
    return weighted_sum / total_count
