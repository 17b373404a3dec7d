from datetime import datetime, timezone

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FoodItemPayload(BaseModel):
    name: str
    description: str
    price: float


class FoodItemRequest(FoodItemPayload):
    """HTTP request body. JSON responses cannot carry inf/nan, so prices must be finite here."""

    price: float = Field(allow_inf_nan=False)


class FoodItem(BaseModel):
    id: int = Field(ge=0)
    name: str = ""
    description: str = ""
    price: float = 0.0
    available: bool = True
    created_at: datetime = Field(default_factory=_utcnow)

    # inf/nan prices are stored as Infinity/NaN instead of null
    model_config = {"extra": "ignore", "from_attributes": True, "ser_json_inf_nan": "constants"}


class FoodItemEnvelope(BaseModel):
    """Stored form of a FoodItem. Unknown fields are ignored so older builds can read newer records."""

    record_version: int = 1
    item: FoodItem

    model_config = {"extra": "ignore", "ser_json_inf_nan": "constants"}
