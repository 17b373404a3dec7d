from sqlalchemy import BigInteger, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from menu_service.database import Base


class FoodItemRecord(Base):
    """One encoded FoodItem, keyed by its id. Rows come back in ascending id order."""

    __tablename__ = "food_item_records"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    payload: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)


class IdCounter(Base):
    """Scalar cells holding the next id to hand out, one row per counter name."""

    __tablename__ = "id_counters"

    name: Mapped[str] = mapped_column(String(50), primary_key=True)
    value: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
