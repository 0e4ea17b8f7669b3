import logging
from typing import Iterator

from eth_typing import ChecksumAddress

from nethermind.clamm.exceptions import InsufficientError, RevertReason
from nethermind.clamm.types import PositionInfo, PositionKey
from nethermind.clamm.utils import uint_over_under_flow

from .math import Q128, FullMathModule, LiquidityMathModule

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("clamm").getChild("positions")


class PositionLedger:
    """
    Stores every position of a pool, keyed by (owner, tick_lower, tick_upper).

    Positions are created on first mint, and are only removed when the mint that created them is rolled back.
    A fully burned and collected position stays in the ledger with zero liquidity and zero tokens owed.
    """

    def __init__(self, positions: dict[PositionKey, PositionInfo] | None = None):
        self.positions: dict[PositionKey, PositionInfo] = dict(positions) if positions else {}

    def __getitem__(self, key: PositionKey) -> PositionInfo:
        return self.positions[key]

    def __contains__(self, key: PositionKey) -> bool:
        return key in self.positions

    def __len__(self) -> int:
        return len(self.positions)

    def __iter__(self) -> Iterator[PositionKey]:
        return iter(self.positions)

    def items(self):
        return self.positions.items()

    def get(self, owner: ChecksumAddress, tick_lower: int, tick_upper: int) -> PositionInfo | None:
        """Returns the position, or None if the owner never minted the range"""
        return self.positions.get((owner, tick_lower, tick_upper))

    def get_or_create(self, owner: ChecksumAddress, tick_lower: int, tick_upper: int) -> PositionInfo:
        """Returns the position, inserting an empty position if it does not exist yet"""
        key = (owner, tick_lower, tick_upper)
        if key not in self.positions:
            self.positions[key] = PositionInfo.uninitialized()
        return self.positions[key]

    def restore(self, key: PositionKey, position_info: PositionInfo | None):
        """Puts back a position saved before a failed operation.  None removes a position the operation created"""
        if position_info is None:
            self.positions.pop(key, None)
        else:
            self.positions[key] = position_info

    @staticmethod
    def accrued_fees(
        position_info: PositionInfo,
        fee_growth_inside_0: int,
        fee_growth_inside_1: int,
    ) -> tuple[int, int]:
        """
        Computes the fees earned by a position since it was last updated, without modifying it.

        :param position_info: position to compute fees for
        :param fee_growth_inside_0: current token 0 fee growth inside the position range
        :param fee_growth_inside_1: current token 1 fee growth inside the position range
        :return: (fees_0, fees_1)
        """
        fee_growth_delta_0 = uint_over_under_flow(fee_growth_inside_0 - position_info.fee_growth_inside_0_last, 256)
        fee_growth_delta_1 = uint_over_under_flow(fee_growth_inside_1 - position_info.fee_growth_inside_1_last, 256)

        return (
            FullMathModule.mul_div(fee_growth_delta_0, position_info.liquidity, Q128),
            FullMathModule.mul_div(fee_growth_delta_1, position_info.liquidity, Q128),
        )

    def update(
        self,
        position_info: PositionInfo,
        liquidity_delta: int,
        fee_growth_inside_0: int,
        fee_growth_inside_1: int,
    ) -> PositionInfo:
        """
        Credits accrued fees to a position and applies a liquidity delta.

        A zero liquidity delta is a "poke" that only accrues fees, and requires the position to hold liquidity.

        :param position_info: position to update in place
        :param liquidity_delta: signed change in position liquidity
        :param fee_growth_inside_0: current token 0 fee growth inside the position range
        :param fee_growth_inside_1: current token 1 fee growth inside the position range
        :return: the updated position
        """
        if liquidity_delta == 0:
            if position_info.liquidity == 0:
                raise InsufficientError("Cannot poke a position with no liquidity", RevertReason.NO_POSITION)
            liquidity_next = position_info.liquidity
        else:
            liquidity_next = LiquidityMathModule.add_delta(position_info.liquidity, liquidity_delta)

        tokens_owed_0, tokens_owed_1 = self.accrued_fees(position_info, fee_growth_inside_0, fee_growth_inside_1)

        logger.debug(
            f"Updating position.  Liquidity Delta: {liquidity_delta}, Fees Owed 0: {tokens_owed_0}, "
            f"Fees Owed 1: {tokens_owed_1}"
        )

        position_info.liquidity = liquidity_next
        position_info.fee_growth_inside_0_last = fee_growth_inside_0
        position_info.fee_growth_inside_1_last = fee_growth_inside_1
        position_info.tokens_owed_0 += tokens_owed_0
        position_info.tokens_owed_1 += tokens_owed_1

        return position_info
