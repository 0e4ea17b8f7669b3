from .exceptions import (
    FullMathRevert,
    InsufficientError,
    LiquidityMathRevert,
    MathRevert,
    PoolRevert,
    RevertReason,
    SettlementError,
    SqrtPriceMathRevert,
    StateError,
    TickMathRevert,
    ValidationError,
)
from .pool import ConcentratedLiquidityPool, PoolMath
from .tokens import NULL_TOKEN, ERC20Token

__all__ = [
    "ConcentratedLiquidityPool",
    "PoolMath",
    "ERC20Token",
    "NULL_TOKEN",
    "PoolRevert",
    "RevertReason",
    "ValidationError",
    "StateError",
    "InsufficientError",
    "SettlementError",
    "MathRevert",
    "FullMathRevert",
    "TickMathRevert",
    "SqrtPriceMathRevert",
    "LiquidityMathRevert",
]
