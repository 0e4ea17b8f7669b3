from enum import Enum


class RevertReason(Enum):
    """Machine readable cause attached to every pool error through ``exc.reason``"""

    LOCKED = "locked"
    NOT_INITIALIZED = "not_initialized"
    ALREADY_INITIALIZED = "already_initialized"

    INVALID_SQRT_PRICE = "invalid_sqrt_price"
    INVALID_TICK = "invalid_tick"
    INVALID_TICK_RANGE = "invalid_tick_range"
    INVALID_PRICE_LIMIT = "invalid_price_limit"
    INVALID_POOL_PARAMETERS = "invalid_pool_parameters"
    ZERO_LIQUIDITY = "zero_liquidity"
    ZERO_AMOUNT = "zero_amount"
    NEGATIVE_AMOUNT = "negative_amount"

    NO_POSITION = "no_position"
    INSUFFICIENT_LIQUIDITY = "insufficient_liquidity"

    LIQUIDITY_OVERFLOW = "liquidity_overflow"
    LIQUIDITY_UNDERFLOW = "liquidity_underflow"
    TICK_LIQUIDITY_OVERFLOW = "tick_liquidity_overflow"
    MUL_DIV_OVERFLOW = "mul_div_overflow"
    DIVISION_BY_ZERO = "division_by_zero"
    TICK_OUT_OF_BOUNDS = "tick_out_of_bounds"
    SQRT_PRICE_OUT_OF_BOUNDS = "sqrt_price_out_of_bounds"
    AMOUNT_OVERFLOW = "amount_overflow"

    SETTLEMENT_MISMATCH = "settlement_mismatch"


class PoolRevert(Exception):
    """
    Base class for every failure raised by a concentrated liquidity pool.  A pool operation that raises
    a PoolRevert leaves the pool exactly as it was before the operation was called.

    The ``reason`` attribute carries a :class:`RevertReason` so callers can branch on the failure without
    parsing the message.
    """

    default_reason: RevertReason | None = None

    def __init__(self, message: str = "", reason: RevertReason | None = None):
        self.reason = reason if reason is not None else self.default_reason
        super().__init__(message or (self.reason.value if self.reason else ""))


class ValidationError(PoolRevert):
    """
    Raised when the arguments of an operation are malformed.  The following conditions raise this error:

        * Ticks outside of MIN_TICK and MAX_TICK, or ticks that are not a multiple of the tick spacing
        * tick_lower greater than or equal to tick_upper
        * Minting zero liquidity, or swapping a zero amount
        * Swapping with a sqrt_price limit on the wrong side of the current price or outside the price domain
        * Initializing a pool with a sqrt_price outside of MIN_SQRT_RATIO and MAX_SQRT_RATIO
    """


class StateError(PoolRevert):
    """
    Raised when an operation is not allowed in the current lifecycle state of the pool.  Operations on an
    uninitialized pool, initializing a pool twice, and reentrant calls while the pool is locked raise this error.
    """


class InsufficientError(PoolRevert):
    """Raised when a position holds less liquidity than an operation requires"""

    default_reason = RevertReason.INSUFFICIENT_LIQUIDITY


class SettlementError(PoolRevert):
    """
    Raised by callers from inside a mint or swap callback when the owed tokens cannot be delivered.
    The pool rolls the operation back before the error propagates.
    """

    default_reason = RevertReason.SETTLEMENT_MISMATCH


class MathRevert(PoolRevert, ArithmeticError):
    """
    Base class for fixed point math failures.  Integer math never saturates, so any overflow, underflow
    or division by zero inside the math modules surfaces as a subclass of this error.
    """


class FullMathRevert(MathRevert):
    """
    Raised when the result of (a * b) / c overflows the maximum value of a uint256, or when c is zero.
    """

    default_reason = RevertReason.MUL_DIV_OVERFLOW


class TickMathRevert(MathRevert):
    """
    Raised when a tick value is out of bounds, or a sqrt_price exceeds the maximum sqrt_price
    """

    default_reason = RevertReason.TICK_OUT_OF_BOUNDS


class SqrtPriceMathRevert(MathRevert):
    """
    Raised when a sqrt_price value is out of bounds, or the inputs to a price calculation are
    invalid, ie computing a price with zero liquidity or removing more reserves than the price range holds
    """

    default_reason = RevertReason.SQRT_PRICE_OUT_OF_BOUNDS


class LiquidityMathRevert(MathRevert):
    """
    Raised when liquidity arithmetic leaves the uint128 domain.  Adding a negative delta larger than the
    current liquidity, exceeding 2**128 - 1, or exceeding the maximum liquidity per tick raise this error.
    """

    default_reason = RevertReason.LIQUIDITY_OVERFLOW
