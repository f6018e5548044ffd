import threading
from decimal import Context, Decimal, MAX_EMAX, MAX_PREC, MIN_EMIN
from typing import Callable, Dict, Optional

ZERO = Decimal("0")

# Additions under this context never round.
_EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)


class Accumulator:
    """
    Atomic reference to a monetary value.

    Reads are lock-free; writes go through compare-and-set so that
    read-modify-write updates retry instead of overwriting each other.
    """

    def __init__(self, value: Decimal = ZERO):
        self._value = value
        self._lock = threading.Lock()

    def get(self) -> Decimal:
        return self._value

    def set(self, value: Decimal) -> None:
        with self._lock:
            self._value = value

    def compare_and_set(self, expected: Decimal, new: Decimal) -> bool:
        with self._lock:
            if self._value is not expected:
                return False
            self._value = new
            return True

    def update_and_get(self, update: Callable[[Decimal], Decimal]) -> Decimal:
        while True:
            current = self.get()
            new = update(current)
            if self.compare_and_set(current, new):
                return new

    def add_and_get(self, amount: Decimal) -> Decimal:
        return self.update_and_get(lambda current: _EXACT.add(current, amount))


class BalanceStore:
    """
    Per-driver running totals.

    Entries are created lazily with a zero balance and never removed.
    Inserting a new driver takes the lock of the shard the driver ID hashes
    to; looking up an existing driver takes no map lock at all.
    """

    def __init__(self, shards: int = 16):
        if shards < 1:
            raise ValueError("shards must be at least 1")
        self._balances: Dict[int, Accumulator] = {}
        self._shard_locks = [threading.Lock() for _ in range(shards)]

    def __len__(self) -> int:
        return len(self._balances)

    def __contains__(self, driver_id: object) -> bool:
        return driver_id in self._balances

    def get_balance(self, driver_id: Optional[int]) -> Decimal:
        if driver_id is None:
            return ZERO
        return self._accumulator(driver_id).get()

    def add_earnings(self, driver_id: Optional[int], amount: Optional[Decimal]) -> Optional[Decimal]:
        if driver_id is None or amount is None:
            return None
        return self._accumulator(driver_id).add_and_get(amount)

    def reset_balance(self, driver_id: Optional[int]) -> Optional[Decimal]:
        if driver_id is None:
            return None
        self._accumulator(driver_id).set(ZERO)
        return ZERO

    def _accumulator(self, driver_id: int) -> Accumulator:
        accumulator = self._balances.get(driver_id)
        if accumulator is not None:
            return accumulator

        lock = self._shard_locks[hash(driver_id) % len(self._shard_locks)]
        with lock:
            accumulator = self._balances.get(driver_id)
            if accumulator is None:
                accumulator = Accumulator()
                self._balances[driver_id] = accumulator
            return accumulator
