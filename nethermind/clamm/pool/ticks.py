import bisect
import logging
from typing import Iterator

from nethermind.clamm.exceptions import LiquidityMathRevert, RevertReason
from nethermind.clamm.types import Tick
from nethermind.clamm.utils import uint_over_under_flow

from .math import MAX_TICK, MIN_TICK, LiquidityMathModule

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("clamm").getChild("ticks")


class TickRegistry:
    """
    Sparse registry of tick boundaries, keyed by tick index.

    Ticks are created the first time a position references them, and are only removed when the operation that
    created them is rolled back.  A tick whose liquidity_gross returns to zero stays in the registry with
    ``initialized=False``.  A sorted index of the initialized ticks is kept alongside the mapping, so the swap loop
    can search for the next tick to cross with a bisect instead of scanning the price range.
    """

    def __init__(self, ticks: dict[int, Tick] | None = None):
        self.ticks: dict[int, Tick] = dict(ticks) if ticks else {}
        self._initialized: list[int] = sorted(index for index, tick in self.ticks.items() if tick.initialized)

    def __getitem__(self, tick: int) -> Tick:
        return self.ticks[tick]

    def __contains__(self, tick: int) -> bool:
        return tick in self.ticks

    def __len__(self) -> int:
        return len(self.ticks)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self.ticks))

    def items(self) -> list[tuple[int, Tick]]:
        """Returns (tick_index, Tick) pairs sorted by tick index"""
        return sorted(self.ticks.items())

    def get(self, tick: int) -> Tick | None:
        return self.ticks.get(tick)

    @property
    def initialized_ticks(self) -> list[int]:
        """Sorted list of the tick indexes referenced by at least one position"""
        return list(self._initialized)

    def set(self, tick: int, tick_data: Tick):
        """
        Overwrites the data stored for a tick, keeping the initialized index in sync.  Used when loading
        saved pools, rolling back failed operations, and preparing test fixtures.
        """
        self.ticks[tick] = tick_data
        self._sync_index(tick, tick_data.initialized)

    def restore(self, tick: int, tick_data: Tick | None):
        """Puts back a tick saved before a failed operation.  None removes a tick the operation created"""
        if tick_data is None:
            self.ticks.pop(tick, None)
            self._sync_index(tick, False)
        else:
            self.set(tick, tick_data)

    def _sync_index(self, tick: int, initialized: bool):
        position = bisect.bisect_left(self._initialized, tick)
        present = position < len(self._initialized) and self._initialized[position] == tick
        if initialized and not present:
            self._initialized.insert(position, tick)
        elif not initialized and present:
            self._initialized.pop(position)

    def update(  # pylint: disable=too-many-arguments
        self,
        tick: int,
        tick_current: int,
        liquidity_delta: int,
        fee_growth_global_0: int,
        fee_growth_global_1: int,
        upper: bool,
        max_liquidity: int,
    ) -> bool:
        """
        Updates a tick when a position using it as a boundary is modified.

        :param tick: tick index to update
        :param tick_current: current tick of the pool
        :param liquidity_delta: signed liquidity added to or removed from the position
        :param fee_growth_global_0: current token 0 fee growth of the pool
        :param fee_growth_global_1: current token 1 fee growth of the pool
        :param upper: True when the tick is the upper boundary of the position
        :param max_liquidity: maximum liquidity_gross allowed on a single tick
        :return: True if the tick flipped between initialized and uninitialized
        """
        tick_info = self.ticks.get(tick) or Tick.uninitialized()

        liquidity_gross_before = tick_info.liquidity_gross
        liquidity_gross_after = LiquidityMathModule.add_delta(liquidity_gross_before, liquidity_delta)

        if liquidity_gross_after > max_liquidity:
            raise LiquidityMathRevert(
                f"Tick Liquidity ({liquidity_gross_after}) Overflows Max Liquidity ({max_liquidity})",
                RevertReason.TICK_LIQUIDITY_OVERFLOW,
            )

        flipped = (liquidity_gross_before == 0) != (liquidity_gross_after == 0)

        if liquidity_gross_before == 0:
            # by convention, all fee growth before a tick is initialized happened below the tick
            if tick <= tick_current:
                tick_info.fee_growth_outside_0 = fee_growth_global_0
                tick_info.fee_growth_outside_1 = fee_growth_global_1
            else:
                tick_info.fee_growth_outside_0 = 0
                tick_info.fee_growth_outside_1 = 0

        tick_info.liquidity_gross = liquidity_gross_after
        tick_info.liquidity_net += -liquidity_delta if upper else liquidity_delta
        tick_info.initialized = liquidity_gross_after != 0
        self.ticks[tick] = tick_info

        if flipped:
            logger.debug(f"Tick {tick} flipped to {'initialized' if tick_info.initialized else 'uninitialized'}")
            self._sync_index(tick, tick_info.initialized)

        return flipped

    def cross(self, tick: int, fee_growth_global_0: int, fee_growth_global_1: int) -> int:
        """
        Transitions a tick as the price moves across it, flipping its fee growth outside to the other side.

        :param tick: tick index being crossed
        :param fee_growth_global_0: token 0 fee growth of the pool at the time of crossing
        :param fee_growth_global_1: token 1 fee growth of the pool at the time of crossing
        :return: liquidity_net of the tick
        """
        tick_info = self.ticks[tick]

        tick_info.fee_growth_outside_0 = uint_over_under_flow(fee_growth_global_0 - tick_info.fee_growth_outside_0, 256)
        tick_info.fee_growth_outside_1 = uint_over_under_flow(fee_growth_global_1 - tick_info.fee_growth_outside_1, 256)

        return tick_info.liquidity_net

    def get_fee_growth_inside(
        self,
        tick_lower: int,
        tick_upper: int,
        tick_current: int,
        fee_growth_global_0: int,
        fee_growth_global_1: int,
    ) -> tuple[int, int]:
        """
        Computes the fee growth per unit of liquidity between two ticks.  The result is only meaningful as a
        difference against an earlier snapshot of the same range, and wraps around at 2**256.

        :return: (fee_growth_inside_0, fee_growth_inside_1)
        """
        empty = Tick.uninitialized()
        lower = self.ticks.get(tick_lower, empty)
        upper = self.ticks.get(tick_upper, empty)

        if tick_current >= tick_lower:
            fee_growth_below_0 = lower.fee_growth_outside_0
            fee_growth_below_1 = lower.fee_growth_outside_1
        else:
            fee_growth_below_0 = fee_growth_global_0 - lower.fee_growth_outside_0
            fee_growth_below_1 = fee_growth_global_1 - lower.fee_growth_outside_1

        if tick_current < tick_upper:
            fee_growth_above_0 = upper.fee_growth_outside_0
            fee_growth_above_1 = upper.fee_growth_outside_1
        else:
            fee_growth_above_0 = fee_growth_global_0 - upper.fee_growth_outside_0
            fee_growth_above_1 = fee_growth_global_1 - upper.fee_growth_outside_1

        return (
            uint_over_under_flow(fee_growth_global_0 - fee_growth_below_0 - fee_growth_above_0, 256),
            uint_over_under_flow(fee_growth_global_1 - fee_growth_below_1 - fee_growth_above_1, 256),
        )

    def next_initialized_tick(self, tick: int, less_than_or_equal: bool) -> tuple[int, bool]:
        """
        Finds the next initialized tick in the direction of a swap.

        :param tick: starting tick
        :param less_than_or_equal: search for the greatest initialized tick <= tick when True, otherwise
            search for the smallest initialized tick > tick
        :return: (tick_next, initialized).  When no initialized tick exists in the direction of the search,
            MIN_TICK or MAX_TICK is returned with initialized set to False
        """
        if less_than_or_equal:
            position = bisect.bisect_right(self._initialized, tick) - 1
            if position < 0:
                return MIN_TICK, False
        else:
            position = bisect.bisect_right(self._initialized, tick)
            if position >= len(self._initialized):
                return MAX_TICK, False

        return self._initialized[position], True

    def liquidity_net_total(self) -> int:
        """Sum of liquidity_net over every tick.  Zero whenever every position is bounded by two ticks"""
        return sum(tick.liquidity_net for tick in self.ticks.values())

    def active_liquidity_at(self, tick: int) -> int:
        """Sum of liquidity_net for all ticks less than or equal to tick"""
        return sum(info.liquidity_net for index, info in self.ticks.items() if index <= tick)
