from .main import ConcentratedLiquidityPool
from .math import PoolMath
from .positions import PositionLedger
from .ticks import TickRegistry

__all__ = ["ConcentratedLiquidityPool", "PoolMath", "PositionLedger", "TickRegistry"]
