from store_ratings.db.models.user import User  # noqa: F401
from store_ratings.db.models.store import Store  # noqa: F401
from store_ratings.db.models.rating import Rating  # noqa: F401
