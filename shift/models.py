from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DriverShiftBalance(BaseModel):
    current_total: Decimal

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"example": {"currentTotal": "20.00"}},
    )


class AddEarningsRequest(BaseModel):
    driver_id: Optional[int] = Field(default=None, description="Driver to credit; null is ignored")
    amount: Optional[Decimal] = Field(default=None, description="Amount to add; null is ignored")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={"example": {"driverId": 42, "amount": "15.50"}},
    )


class ResetBalanceRequest(BaseModel):
    driver_id: Optional[int] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShiftBalanceResponse(BaseModel):
    applied: bool
    driver_id: Optional[int] = None
    current_total: Optional[Decimal] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
