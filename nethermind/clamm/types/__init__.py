from .pool import (
    OperationJournal,
    PoolImmutables,
    PoolState,
    PositionInfo,
    PositionKey,
    Slot0,
    SwapState,
    SwapStep,
    Tick,
)

__all__ = [
    "OperationJournal",
    "PoolImmutables",
    "PoolState",
    "PositionInfo",
    "PositionKey",
    "Slot0",
    "SwapState",
    "SwapStep",
    "Tick",
]
