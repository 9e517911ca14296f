from decimal import Decimal
from typing import Annotated, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

# Numbers on the wire, Decimal in Python
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
Quantity = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """JSON uses camelCase keys (storeId, stockQuantity, ...); Python stays snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class StoreScoped(CamelModel):
    store_id: Optional[str] = None


T = TypeVar("T")


class DataEnvelope(CamelModel, Generic[T]):
    success: bool = True
    data: T
