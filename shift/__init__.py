"""
Driver Shift Balance Service

This module provides:
- Per-driver running shift totals kept in memory
- Atomic add and reset of a driver's total
- A FastAPI app reporting the current driver's balance
"""

from .models import DriverShiftBalance
from .service import (
    ShiftBalanceService,
    ShiftBalanceError,
    InvalidAmountError,
    MissingDriverIdError,
)
from .storage import Accumulator, BalanceStore

__all__ = [
    "Accumulator",
    "BalanceStore",
    "DriverShiftBalance",
    "ShiftBalanceService",
    "ShiftBalanceError",
    "InvalidAmountError",
    "MissingDriverIdError",
]
