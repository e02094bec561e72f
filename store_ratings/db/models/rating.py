from datetime import datetime
from store_ratings.db.base import Base
from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from store_ratings.db.models.user import utcnow


class Rating(Base):
    __tablename__ = "ratings"

    __table_args__ = (
        UniqueConstraint("user_id", "store_id", name="uq_ratings_user_id_store_id"),
        CheckConstraint("value BETWEEN 1 AND 5", name="ck_ratings_value_range"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    store_id: Mapped[int] = mapped_column(
        ForeignKey("stores.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    user: Mapped["User"] = relationship(back_populates="ratings")
    store: Mapped["Store"] = relationship(back_populates="ratings")
