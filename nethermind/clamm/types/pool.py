from dataclasses import dataclass, field

from eth_typing import ChecksumAddress
from pydantic import BaseModel

from nethermind.clamm.tokens.erc_20 import ERC20Token


class Slot0(BaseModel):
    """Stores the current price, tick, and reentrancy lock of the pool"""

    sqrt_price: int
    """
        Square root of the token_1 / token_0 price, stored as a Q64.96 fixed point integer.
        A sqrt_price of zero marks a pool that has not been initialized.
    """
    tick: int
    """
        Current Tick of the Pool.  Ticks are discrete price ranges representing a 0.01% change in price.
        The current tick is always the greatest tick whose sqrt price is less than or equal to sqrt_price.

        The price at a tick is 1.0001 ** tick
    """
    locked: bool
    """
        Set while an operation is executing.  Any operation started while the pool is locked is rejected.
    """

    @classmethod
    def uninitialized(cls) -> "Slot0":
        """Returns an uninitialized slot0 used before the pool price is set"""
        return Slot0(sqrt_price=0, tick=0, locked=False)


class PoolState(BaseModel):
    """Active liquidity, fee accumulators and expected token balances of the pool"""

    liquidity: int
    """
    Liquidity of every position whose range contains the current tick.  Only changes during a swap when an
    initialized tick is crossed.
    When crossing a tick, this value is increased or reduced by the liquidity_net of the tick.
    """
    fee_growth_global_0: int
    """
    Tracks fee accumulation for token_0 as a Q128.128 amount of fees per unit of liquidity.  When selling token_0,
    the swap fee is collected in token_0, and added to this accumulator.  Wraps around at 2**256.
    """
    fee_growth_global_1: int
    """
    Token 1 counterpart of fee_growth_global_0, increased by swaps selling token_1.
    """
    balance_0: int
    """
    Expected balance of token_0 in pool, assuming every operation is settled.  Increased by mints and swap inputs,
    decreased by swap outputs and collects.  Burned liquidity stays in the pool until it is collected.
    """
    balance_1: int
    """
    Expected balance of token_1 in pool, assuming every operation is settled.
    """

    @classmethod
    def uninitialized(cls) -> "PoolState":
        """Returns an empty pool state used during pool initialization"""
        return PoolState(
            liquidity=0,
            fee_growth_global_0=0,
            fee_growth_global_1=0,
            balance_0=0,
            balance_1=0,
        )


class PoolImmutables(BaseModel):
    """
    Stores the pool's immutable parameters that are set once during pool creation and will
    never change.
    """

    pool_address: ChecksumAddress
    """
        Address identifying the pool
    """
    token_0: ERC20Token
    """
        Token whose price is quoted in units of token_1
    """
    token_1: ERC20Token
    """
        Quote token of the pool
    """
    fee: int
    """
        Swap fee taken from the input token, in hundredths of a bip on a 1,000,000 denominator.
        A fee of 3000 charges 0.3% of every swap input.
    """
    tick_spacing: int
    """
        Number of ticks between liquidity deployments.  Position bounds must be multiples of the tick spacing.
    """
    max_liquidity_per_tick: int
    """
        Limit on the liquidity_gross that can reference a single tick.  Computed by dividing the maximum uint128
        value by the number of usable ticks within the pool, so active liquidity can never overflow.
    """


class Tick(BaseModel):
    """Liquidity and fee growth bookkeeping for a single tick boundary"""

    liquidity_gross: int
    """
    Total liquidity owned by all positions that use this tick as an upper tick or a lower tick.
    A tick is initialized while its liquidity_gross is non-zero.
    """
    liquidity_net: int
    """
    Change in active liquidity when the price crosses this tick upwards.  Lower bounds of positions add
    their liquidity, upper bounds subtract it.  Crossing downwards applies the negated value.
    """
    fee_growth_outside_0: int
    """
        Token 0 fee growth per unit of liquidity on the other side of this tick, relative to the current tick.
    """
    fee_growth_outside_1: int
    """
        Token 1 fee growth per unit of liquidity on the other side of this tick, relative to the current tick.
    """
    initialized: bool
    """
        Whether any position currently references this tick.  Ticks are never removed from the registry, a tick
        whose liquidity returns to zero is kept with initialized set to False.
    """

    @classmethod
    def uninitialized(cls) -> "Tick":
        """
        Empty tick used on first reference
        """
        return Tick(
            liquidity_gross=0,
            liquidity_net=0,
            fee_growth_outside_0=0,
            fee_growth_outside_1=0,
            initialized=False,
        )


class PositionInfo(BaseModel):
    """
    Liquidity and fee accounting of a single (owner, tick_lower, tick_upper) position.

    .. note::
        tokens_owed is only updated when the position is modified.  To value a position at the current price,
        use :meth:`ConcentratedLiquidityPool.get_position_amounts` and
        :meth:`ConcentratedLiquidityPool.get_uncollected_fees`
    """

    liquidity: int
    """
        Liquidity the owner has deposited into the range
    """
    fee_growth_inside_0_last: int
    """
        Token 0 fee growth inside the position range at the last time the position was modified.
        Differences against this value are taken modulo 2**256.
    """
    fee_growth_inside_1_last: int
    """
        Token 1 Fee growth inside the position range at the last time the position was modified.
    """
    tokens_owed_0: int
    """
        Number of token_0 owed to the position owner from burned liquidity and accrued fees
    """
    tokens_owed_1: int
    """
        Number of token_1 owed to the position owner from burned liquidity and accrued fees
    """

    @classmethod
    def uninitialized(cls) -> "PositionInfo":
        """
        Empty position used on first mint
        """
        return PositionInfo(
            liquidity=0,
            fee_growth_inside_0_last=0,
            fee_growth_inside_1_last=0,
            tokens_owed_0=0,
            tokens_owed_1=0,
        )


PositionKey = tuple[ChecksumAddress, int, int]


@dataclass(slots=True)
class SwapState:
    """Running totals of the swap loop, committed to the pool once the loop finishes"""

    amount_specified_remaining: int
    amount_calculated: int
    sqrt_price: int
    tick: int
    fee_growth_global: int
    liquidity: int


@dataclass(slots=True)
class SwapStep:
    """Per-iteration values of the swap loop"""

    sqrt_price_start: int
    tick_next: int = 0
    initialized: bool = False
    sqrt_price_next: int = 0
    amount_in: int = 0
    amount_out: int = 0
    fee_amount: int = 0


@dataclass(slots=True)
class OperationJournal:
    """
    Pool records touched by the operation holding the lock, saved before their first modification.  A saved value
    of None marks a tick or position created by the operation.
    """

    slot0: Slot0
    state: PoolState
    ticks: dict[int, Tick | None] = field(default_factory=dict)
    positions: dict[PositionKey, PositionInfo | None] = field(default_factory=dict)
