from dataclasses import dataclass

from nethermind.clamm.exceptions import RevertReason, ValidationError

MAX_TICK = 887272
MIN_TICK = -MAX_TICK
MAX_SQRT_RATIO = 1461446703485210103287273052203988822378723970342
MIN_SQRT_RATIO = 4295128739
SQRT_RESOLUTION = 96
SQRT_Q96 = 0x1000000000000000000000000
Q128 = 0x100000000000000000000000000000000
UINT_128_MAX = 2**128 - 1
UINT_160_MAX = 2**160 - 1
UINT_256_MAX = 2**256 - 1
INT_256_MAX = 2**255 - 1

FEE_DENOMINATOR = 1_000_000

FEES_TO_TICK_SPACINGS = {
    100: 1,
    500: 10,
    3000: 60,
    10000: 200,
}

TICK_SPACINGS_TO_FEES = {v: k for k, v in FEES_TO_TICK_SPACINGS.items()}


@dataclass(slots=True)
class SwapComputation:
    """Model to store the results of a swap step computation"""

    sqrt_price_next: int
    amount_in: int
    amount_out: int
    fee_amount: int


def check_ticks(cls, tick_lower: int, tick_upper: int, tick_spacing: int):  # pylint: disable=unused-argument
    """
    Checks that ticks form a valid range.  Raises ValidationError if tick_lower is not below tick_upper,
    if either tick exceeds MIN_TICK or MAX_TICK, or if either tick is not a multiple of the tick spacing.

    :param tick_lower:
    :param tick_upper:
    :param tick_spacing:
    :return:
    """
    if tick_lower >= tick_upper:
        raise ValidationError(
            f"tick_lower {tick_lower} must be less than tick_upper {tick_upper}",
            RevertReason.INVALID_TICK_RANGE,
        )
    if tick_lower < MIN_TICK:
        raise ValidationError(f"tick_lower must be greater than MIN_TICK: {tick_lower}", RevertReason.INVALID_TICK)
    if tick_upper > MAX_TICK:
        raise ValidationError(f"tick_upper must be less than MAX_TICK: {tick_upper}", RevertReason.INVALID_TICK)
    if tick_lower % tick_spacing or tick_upper % tick_spacing:
        raise ValidationError(
            f"Ticks ({tick_lower}, {tick_upper}) must be multiples of tick spacing {tick_spacing}",
            RevertReason.INVALID_TICK,
        )


def check_sqrt_price(cls, sqrt_price: int):  # pylint: disable=unused-argument
    """
    Checks that sqrt_price can be used as a pool price.  Raises ValidationError unless
    MIN_SQRT_RATIO <= sqrt_price < MAX_SQRT_RATIO.

    :param sqrt_price:
    :return:
    """
    if not MIN_SQRT_RATIO <= sqrt_price < MAX_SQRT_RATIO:
        raise ValidationError(
            f"sqrt_price must be between MIN_SQRT_RATIO and MAX_SQRT_RATIO: {sqrt_price}",
            RevertReason.INVALID_SQRT_PRICE,
        )


def get_max_liquidity_per_tick(cls, tick_spacing: int) -> int:  # pylint: disable=unused-argument
    """
    Returns the maximum liquidity per tick.  This is calculated by dividing the UINT_128_MAX by the number of ticks
    that can exist in the range of ticks for a given tick spacing.

    :param tick_spacing:
    :return:
    """
    max_tick = (MAX_TICK // tick_spacing) * tick_spacing
    number_of_ticks = (2 * max_tick) // tick_spacing + 1
    return UINT_128_MAX // number_of_ticks
