import logging
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from .models import DriverShiftBalance
from .storage import BalanceStore

logger = logging.getLogger(__name__)

Amount = Union[Decimal, int, float, str]

# Amounts stay below 10**16 with at most 12 decimal places, so every total is bounded.
MAX_AMOUNT_EXPONENT = 15
MAX_DECIMAL_PLACES = 12


class ShiftBalanceError(Exception):
    pass


class InvalidAmountError(ShiftBalanceError):
    pass


class MissingDriverIdError(ShiftBalanceError):
    pass


def to_amount(value: Amount) -> Decimal:
    """Convert ``value`` to a finite Decimal without going through binary floats."""
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise InvalidAmountError(f"Amount must be finite, got {amount}")
    if amount.adjusted() > MAX_AMOUNT_EXPONENT or amount.as_tuple().exponent < -MAX_DECIMAL_PLACES:
        raise InvalidAmountError(f"Amount out of range: {amount}")
    return amount


class ShiftBalanceService:
    def __init__(self, store: Optional[BalanceStore] = None):
        self.store = store if store is not None else BalanceStore()

    def get_current_shift_balance(self, driver_id: int) -> DriverShiftBalance:
        if driver_id is None:
            raise MissingDriverIdError("driver_id is required to read a balance")
        return DriverShiftBalance(current_total=self.store.get_balance(driver_id))

    def add_earnings(self, driver_id: Optional[int], amount: Optional[Amount]) -> Optional[Decimal]:
        if driver_id is None or amount is None:
            logger.debug("Ignoring earnings with missing field (driver=%s, amount=%s)", driver_id, amount)
            return None

        total = self.store.add_earnings(driver_id, to_amount(amount))
        logger.debug("Driver %s earned %s, shift total now %s", driver_id, amount, total)
        return total

    def reset_balance(self, driver_id: Optional[int]) -> Optional[Decimal]:
        if driver_id is None:
            logger.debug("Ignoring balance reset without driver id")
            return None

        total = self.store.reset_balance(driver_id)
        logger.info("Shift balance reset for driver %s", driver_id)
        return total
