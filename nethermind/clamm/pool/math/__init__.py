import logging

from nethermind.clamm.exceptions import RevertReason, ValidationError

from .full_math import FullMathModule
from .liquidity_math import LiquidityMathModule
from .shared import (
    FEE_DENOMINATOR,
    FEES_TO_TICK_SPACINGS,
    MAX_SQRT_RATIO,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MIN_TICK,
    Q128,
    SQRT_Q96,
    TICK_SPACINGS_TO_FEES,
    UINT_128_MAX,
    UINT_256_MAX,
    SwapComputation,
    check_sqrt_price,
    check_ticks,
    get_max_liquidity_per_tick,
)
from .sqrt_price_math import SqrtPriceMathModule
from .swap_math import SwapMathModule
from .tick_math import TickMathModule

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("clamm").getChild("math")


class PoolMath:
    """
    Aggregates the fixed point math modules used by concentrated liquidity pools
    """

    MAX_SQRT_RATIO = MAX_SQRT_RATIO
    MIN_SQRT_RATIO = MIN_SQRT_RATIO

    MAX_TICK = MAX_TICK
    MIN_TICK = MIN_TICK

    UINT_128_MAX = UINT_128_MAX
    Q128 = Q128

    # Math Modules

    full_math = FullMathModule
    sqrt_price_math = SqrtPriceMathModule
    tick_math = TickMathModule
    liquidity_math = LiquidityMathModule
    swap_math = SwapMathModule

    get_max_liquidity_per_tick = classmethod(get_max_liquidity_per_tick)

    # Safety Methods
    check_ticks = classmethod(check_ticks)
    check_sqrt_price = classmethod(check_sqrt_price)

    @classmethod
    def get_fee_and_spacing(cls, init_kwargs: dict) -> tuple[int, int]:
        """
        Resolves the fee tier of a new pool from its keyword arguments.  Missing values are filled in from the
        standard tiers, and a pool without either value uses the 0.3% tier.

        :param init_kwargs: keyword arguments passed to the pool constructor
        :return: (fee, tick_spacing)
        """
        fee, spacing = init_kwargs.get("fee"), init_kwargs.get("tick_spacing")

        if fee is None and spacing is None:
            return 3000, 60
        if fee is None:
            fee = TICK_SPACINGS_TO_FEES.get(spacing)
        elif spacing is None:
            spacing = FEES_TO_TICK_SPACINGS.get(fee)
        else:
            if not 0 <= fee < FEE_DENOMINATOR or spacing <= 0:
                raise ValidationError(
                    f"Invalid pool parameters\tFee: {fee}, Tick Spacing: {spacing}",
                    RevertReason.INVALID_POOL_PARAMETERS,
                )
            if FEES_TO_TICK_SPACINGS.get(fee) != spacing:
                logger.warning(
                    f"Tick spacing & Fee were both specified, but do not match typical values"
                    f"\tFee: {fee}, Tick Spacing: {spacing}"
                )

        if fee is None or spacing is None:
            raise ValidationError(
                "Fee or tick spacing is not a standard tier.  Pass both fee and tick_spacing to create a pool "
                "with a custom tier",
                RevertReason.INVALID_POOL_PARAMETERS,
            )
        return fee, spacing


__all__ = [
    "PoolMath",
    "FullMathModule",
    "LiquidityMathModule",
    "SqrtPriceMathModule",
    "SwapMathModule",
    "TickMathModule",
    "SwapComputation",
    "FEE_DENOMINATOR",
    "FEES_TO_TICK_SPACINGS",
    "MAX_SQRT_RATIO",
    "MAX_TICK",
    "MIN_SQRT_RATIO",
    "MIN_TICK",
    "Q128",
    "SQRT_Q96",
    "UINT_128_MAX",
    "UINT_256_MAX",
]
