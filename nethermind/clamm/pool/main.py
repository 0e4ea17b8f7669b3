import json
import logging
from decimal import Decimal, localcontext
from typing import Any, Callable, TextIO

import numpy as np
from eth_typing import ChecksumAddress
from pandas import DataFrame

from nethermind.clamm.exceptions import (
    InsufficientError,
    RevertReason,
    StateError,
    ValidationError,
)
from nethermind.clamm.tokens.erc_20 import NULL_TOKEN, ERC20Token
from nethermind.clamm.types import (
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
from nethermind.clamm.utils import (
    parse_position_key,
    position_key,
    random_address,
    uint_over_under_flow,
)

from .math import PoolMath
from .positions import PositionLedger
from .ticks import TickRegistry

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("clamm").getChild("pool")

SettlementCallback = Callable[[int, int], Any]
"""Called with the signed (amount_0, amount_1) owed to (positive) or paid by (negative) the pool"""

QUOTE_RECIPIENT = ChecksumAddress("0x0000000000000000000000000000000000000001")


def locked(method):
    """
    Decorator that runs a pool operation inside the reentrancy lock.

    Rejects calls on uninitialized pools and reentrant calls.  While the lock is held, slot0, state, and every tick
    or position the operation modifies are recorded in a journal before their first change.  If the operation raises,
    the journal is rolled back, so every operation either completes or leaves no trace.  The lock is released on every
    exit path.
    """

    def inner(ref, *args, **kwargs):
        if ref.slot0.sqrt_price == 0:
            raise StateError(
                f"Pool must be initialized before calling {method.__name__}",
                RevertReason.NOT_INITIALIZED,
            )
        if ref.slot0.locked:
            raise StateError(f"Pool is locked, cannot call {method.__name__}", RevertReason.LOCKED)

        journal = OperationJournal(slot0=ref.slot0.model_copy(), state=ref.state.model_copy())
        ref._journal = journal  # pylint: disable=protected-access
        ref.slot0.locked = True
        try:
            return method(ref, *args, **kwargs)
        except Exception:
            logger.debug(
                f"{method.__name__} failed, restoring pool state and {len(journal.ticks)} ticks, "
                f"{len(journal.positions)} positions"
            )
            ref._rollback(journal)  # pylint: disable=protected-access
            raise
        finally:
            ref._journal = None  # pylint: disable=protected-access
            ref.slot0.locked = False

    inner.__name__ = method.__name__
    inner.__doc__ = method.__doc__
    return inner


# pylint: disable=too-many-instance-attributes, too-many-public-methods
class ConcentratedLiquidityPool:
    """
    Concentrated liquidity pool engine.  Liquidity providers deposit liquidity into price ranges bounded by ticks,
    traders swap against the liquidity active at the current price, and swap fees accrue to the positions whose
    range contains the price.

    All math is performed on integers with the rounding of the on-chain fixed point implementation, so amounts,
    prices and fees match the on-chain contracts exactly.
    """

    math = PoolMath

    immutables: PoolImmutables
    """
    PoolImmutables object containing the pool fee, token_0, token_1, and other immutable parameters
    """
    slot0: Slot0
    """
    Slot0 object containing the current sqrt_price and tick of the pool, and the reentrancy lock
    """
    state: PoolState
    """
    PoolState object containing the active liquidity, balances, and fee growth accumulators
    """
    ticks: TickRegistry
    """
    Registry of every tick referenced by a position
    """
    positions: PositionLedger
    """
    Ledger of every position, keyed by (owner, tick_lower, tick_upper)
    """

    def __init__(self, **kwargs):
        """
        Creates a new pool.  The pool must be initialized with a price before liquidity can be added.

        :param kwargs:
            * **fee** -- swap fee in hundredths of a bip.  Default: 3000 (0.3%)
            * **tick_spacing** -- tick spacing of the pool.  Defaults to the standard spacing of the fee tier
            * **token_0**, **token_1** -- :class:`~nethermind.clamm.tokens.ERC20Token` traded by the pool
            * **pool_address** -- address identifying the pool.  Default: random address
            * **initial_price** -- Q64.96 sqrt price to initialize the pool with
            * **initial_tick** -- tick to initialize the pool at, if initial_price is not provided
        """
        fee, tick_spacing = self.math.get_fee_and_spacing(kwargs)

        self.immutables = PoolImmutables(
            pool_address=kwargs.get("pool_address", random_address()),
            token_0=kwargs.get("token_0", NULL_TOKEN),
            token_1=kwargs.get("token_1", NULL_TOKEN),
            fee=fee,
            tick_spacing=tick_spacing,
            max_liquidity_per_tick=self.math.get_max_liquidity_per_tick(tick_spacing),
        )
        self.slot0 = Slot0.uninitialized()
        self.state = PoolState.uninitialized()
        self.ticks = TickRegistry()
        self.positions = PositionLedger()
        self._journal: OperationJournal | None = None

        if kwargs.get("initial_price") is not None:
            self.initialize(kwargs["initial_price"])
        elif kwargs.get("initial_tick") is not None:
            self.initialize(self.math.tick_math.get_sqrt_ratio_at_tick(kwargs["initial_tick"]))

    def initialize(self, sqrt_price: int):
        """
        Sets the initial price of the pool.  Can only be called once.

        :param sqrt_price: initial sqrt price of the pool as a Q64.96 value
        """
        if self.slot0.sqrt_price != 0:
            raise StateError("Pool is already initialized", RevertReason.ALREADY_INITIALIZED)

        self.math.check_sqrt_price(sqrt_price)

        self.slot0.sqrt_price = sqrt_price
        self.slot0.tick = self.math.tick_math.get_tick_at_sqrt_ratio(sqrt_price)

        logger.info(f"Initialized {self} at tick {self.slot0.tick}")

    @property
    def initialized(self) -> bool:
        return self.slot0.sqrt_price != 0

    def __repr__(self):
        return (
            f"{self.immutables.token_0.symbol} <-> {self.immutables.token_1.symbol} "
            f"@ {self.immutables.fee / 100} bips"
        )

    # -----------------------------------------------------------------------------------------------------------
    #  Utility Functions
    # -----------------------------------------------------------------------------------------------------------

    def _record_tick(self, tick: int):
        """Saves a tick to the journal of the running operation before its first modification"""
        if tick not in self._journal.ticks:
            tick_data = self.ticks.get(tick)
            self._journal.ticks[tick] = tick_data.model_copy() if tick_data is not None else None

    def _record_position(self, key: PositionKey):
        """Saves a position to the journal of the running operation before its first modification"""
        if key not in self._journal.positions:
            position = self.positions.get(*key)
            self._journal.positions[key] = position.model_copy() if position is not None else None

    def _rollback(self, journal: OperationJournal):
        """Puts back slot0, state, and every tick and position recorded in the journal"""
        self.slot0, self.state = journal.slot0, journal.state
        for tick, tick_data in journal.ticks.items():
            self.ticks.restore(tick, tick_data)
        for key, position in journal.positions.items():
            self.positions.restore(key, position)

    def get_price_at_sqrt_ratio(
        self,
        sqrt_price: int,
        reverse_tokens: bool = False,
    ) -> float:
        """
        Converts a sqrt_price to a human-readable price.

        :param sqrt_price:
            sqrt_price encoded as fixed point Q64.96
        :param reverse_tokens:
            Whether to reverse the tokens in the price.  The sqrt_price represents the
            :math:`\\frac{ Token 1 }{ Token 0}`.  If reverse_tokens is True, the price will be represented as
            :math:`\\frac{ Token 0 }{ Token 1}`.
        """
        token_0, token_1 = self.immutables.token_0, self.immutables.token_1

        raw_price_float = (sqrt_price / (2**96)) ** 2
        adjusted_price = raw_price_float / (10 ** (token_1.decimals - token_0.decimals))

        if reverse_tokens:
            adjusted_price = 1 / adjusted_price

        return adjusted_price

    def get_formatted_price_at_sqrt_ratio(
        self,
        sqrt_price: int,
        reverse_tokens: bool = False,
    ) -> str:
        """
        Converts a sqrt_price to a formatted price string.  Includes rounding to 6 significant figures, and listing
        the Reference Asset, ie WETH: 2245.32 USDC.

        :param sqrt_price:
            sqrt_price encoded as fixed point Q64.96
        :param reverse_tokens:
            Whether to reverse the tokens in the price.
        """
        token_0, token_1 = self.immutables.token_0, self.immutables.token_1
        adjusted_price = self.get_price_at_sqrt_ratio(sqrt_price, reverse_tokens)

        rounded_price = np.format_float_positional(float(f"{adjusted_price:.6g}"))
        return (
            f"{token_1.symbol}: {rounded_price} {token_0.symbol}"
            if reverse_tokens
            else f"{token_0.symbol}: {rounded_price} {token_1.symbol}"
        )

    def get_price_at_tick(
        self,
        tick: int,
        reverse_tokens: bool = False,
        string_description: bool = False,
    ) -> float | str:
        """
        Converts a tick to a human-readable price.

        :param tick:
            Tick value
        :param reverse_tokens:
            Whether to reverse the tokens in the price.
        :param string_description:
            If True, returns a string description of the price in the Format: [WETH: 3,456.23 USDC].
            Otherwise, returns a float.
        """
        sqrt_price = self.math.tick_math.get_sqrt_ratio_at_tick(tick)
        if string_description:
            return self.get_formatted_price_at_sqrt_ratio(sqrt_price, reverse_tokens)
        return self.get_price_at_sqrt_ratio(sqrt_price, reverse_tokens)

    def get_sqrt_ratio_at_price(self, price: float | Decimal, reverse_tokens: bool = False) -> int:
        """
        Converts a human-readable price into a Q64.96 sqrt price, adjusting for token decimals.

        :param price: price of token 0 denominated in token 1, or the inverse if reverse_tokens is True
        :param reverse_tokens: Whether the price is quoted as token 0 per token 1
        """
        token_0, token_1 = self.immutables.token_0, self.immutables.token_1
        with localcontext() as ctx:
            ctx.prec = 80
            raw_price = Decimal(price)
            if reverse_tokens:
                raw_price = 1 / raw_price
            raw_price *= Decimal(10) ** (token_1.decimals - token_0.decimals)
            return int(raw_price.sqrt() * (2**96))

    def get_tick_at_price(self, price: float | Decimal, reverse_tokens: bool = False) -> int:
        """Returns the greatest tick whose price is less than or equal to the human-readable price"""
        return self.math.tick_math.get_tick_at_sqrt_ratio(self.get_sqrt_ratio_at_price(price, reverse_tokens))

    # -----------------------------------------------------------------------------------------------------------
    #  Caching Pool State
    # -----------------------------------------------------------------------------------------------------------

    def save_pool(self, file: TextIO):
        """
        Saves pool state & parameters to JSON file.  This file can later be used to re-initialize a pool
        instance with identical state.

        :param file: writable text file handle for the JSON output
        """
        logger.info("Json Encoding Pool State")

        immutables = self.immutables.model_dump()
        immutables.update(token_0=self.immutables.token_0.to_dict(), token_1=self.immutables.token_1.to_dict())

        pool_state_dict = {
            "immutables": immutables,
            "slot0": self.slot0.model_dump(),
            "state": self.state.model_dump(),
            "ticks": {index: tick.model_dump() for index, tick in self.ticks.items()},
            "positions": {
                position_key(*key): position.model_dump() for key, position in self.positions.items()
            },
        }
        json.dump(pool_state_dict, file)
        logger.info("Pool State Saved")

    @classmethod
    def load_pool(cls, file: TextIO) -> "ConcentratedLiquidityPool":
        """
        Loads a pool from a JSON File generated by the save_pool() method

        :param file: readable text file handle
        :return: ConcentratedLiquidityPool
        """
        pool_params = json.load(file)
        immutables = pool_params["immutables"]

        pool = cls(
            fee=immutables["fee"],
            tick_spacing=immutables["tick_spacing"],
            pool_address=immutables["pool_address"],
            token_0=ERC20Token.from_dict(immutables["token_0"]),
            token_1=ERC20Token.from_dict(immutables["token_1"]),
        )
        pool.slot0 = Slot0.model_validate(pool_params["slot0"])
        pool.state = PoolState.model_validate(pool_params["state"])
        pool.ticks = TickRegistry(
            {int(index): Tick.model_validate(tick) for index, tick in pool_params["ticks"].items()}
        )
        pool.positions = PositionLedger(
            {
                parse_position_key(key): PositionInfo.model_validate(position)
                for key, position in pool_params["positions"].items()
            }
        )
        return pool

    # -----------------------------------------------------------------------------------------------------------
    #  Research & Simulation Functionality
    # -----------------------------------------------------------------------------------------------------------

    def compute_liquidity_at_price(self, reverse_tokens: bool = False, compress: bool = False) -> DataFrame:
        """
        Computes the liquidity at each price point in the pool.

        :param reverse_tokens:
            Reverses the reference token in the price.
        :param compress:
            Compresses the output to only include price points where the liquidity changes by more than 10%.
        :return:
            Dataframe with the current token/token price and the active liquidity at that price.
        """
        current_liquidity = 0
        last_liquidity = 1
        liquidity: dict[str, list] = {"price": [], "active_liquidity": []}
        for tick_index in self.ticks.initialized_ticks:
            current_liquidity += self.ticks[tick_index].liquidity_net
            current_price = self.get_price_at_tick(tick_index, reverse_tokens)
            if compress:
                if abs((current_liquidity - last_liquidity) / last_liquidity) > 0.1:
                    liquidity["price"].append(current_price)
                    liquidity["active_liquidity"].append(current_liquidity)

                    last_liquidity = current_liquidity or 1
            else:
                liquidity["price"].append(current_price)
                liquidity["active_liquidity"].append(current_liquidity)

        return DataFrame(liquidity).astype(float)

    def get_position_amounts(self, owner: ChecksumAddress, tick_lower: int, tick_upper: int) -> tuple[int, int]:
        """
        Returns the token amounts that would be received by burning the entire liquidity of a position at the
        current price.  Does not include tokens owed or uncollected fees.

        :param owner: owner of the position
        :param tick_lower: lower tick of the position
        :param tick_upper: upper tick of the position
        :return: (amount_0, amount_1)
        """
        position = self.positions.get(owner, tick_lower, tick_upper)
        if position is None or position.liquidity == 0:
            return 0, 0

        return self.math.liquidity_math.get_amounts_for_liquidity(
            self.slot0.sqrt_price,
            self.math.tick_math.get_sqrt_ratio_at_tick(tick_lower),
            self.math.tick_math.get_sqrt_ratio_at_tick(tick_upper),
            position.liquidity,
        )

    def get_uncollected_fees(self, owner: ChecksumAddress, tick_lower: int, tick_upper: int) -> tuple[int, int]:
        """
        Returns the tokens that a position could collect after poking it: tokens already owed plus the fees
        accrued since the position was last updated.

        :param owner: owner of the position
        :param tick_lower: lower tick of the position
        :param tick_upper: upper tick of the position
        :return: (amount_0, amount_1)
        """
        position = self.positions.get(owner, tick_lower, tick_upper)
        if position is None:
            return 0, 0

        fee_growth_inside_0, fee_growth_inside_1 = self.ticks.get_fee_growth_inside(
            tick_lower,
            tick_upper,
            self.slot0.tick,
            self.state.fee_growth_global_0,
            self.state.fee_growth_global_1,
        )
        fees_0, fees_1 = PositionLedger.accrued_fees(position, fee_growth_inside_0, fee_growth_inside_1)
        return position.tokens_owed_0 + fees_0, position.tokens_owed_1 + fees_1

    @locked
    def quote_swap(
        self,
        zero_for_one: bool,
        amount_specified: int,
        sqrt_price_limit: int | None = None,
    ) -> tuple[int, int]:
        """
        Simulates a swap without modifying the pool.  Accepts the same parameters as :meth:`swap`.

        :return: (amount_in, amount_out) the swap would execute with
        """
        try:
            return self._swap(QUOTE_RECIPIENT, zero_for_one, amount_specified, sqrt_price_limit)
        finally:
            self._rollback(self._journal)

    # -----------------------------------------------------------------------------------------------------------
    #  Publicly Exposed Pool Methods
    # -----------------------------------------------------------------------------------------------------------

    @locked
    def mint(
        self,
        owner: ChecksumAddress,
        tick_lower: int,
        tick_upper: int,
        amount: int,
        callback: SettlementCallback | None = None,
    ) -> tuple[int, int]:
        """
        Adds liquidity to a position.

        :param ChecksumAddress owner:
            Owner address of the minted liquidity.
        :param int tick_lower:
            Lower bound of the minted liquidity.
        :param int tick_upper:
            Upper bound of the minted liquidity.
        :param int amount:
            Amount of liquidity to mint.
        :param callback:
            Optional settlement hook called with (amount_0, amount_1) owed to the pool before the mint completes.
            Raising from the callback aborts the mint.
        :return: (amount_0, amount_1) of tokens owed to the pool, rounded up
        """
        if amount <= 0:
            raise ValidationError("Cannot Mint 0 or Negative Liquidity", RevertReason.ZERO_LIQUIDITY)

        _, amount_0, amount_1 = self._modify_position(owner, tick_lower, tick_upper, amount)

        if callback is not None:
            callback(amount_0, amount_1)

        self.state.balance_0 += amount_0
        self.state.balance_1 += amount_1

        logger.info(f"Minted {amount} liquidity to ({owner}, {tick_lower}, {tick_upper}) for {amount_0}, {amount_1}")
        return amount_0, amount_1

    @locked
    def burn(
        self,
        owner: ChecksumAddress,
        tick_lower: int,
        tick_upper: int,
        amount: int,
    ) -> tuple[int, int]:
        """
        Removes liquidity from a position.  The withdrawn tokens are credited to the tokens owed of the position,
        and are paid out by :meth:`collect`.  Burning zero liquidity updates the fees owed to the position.

        :param owner:
            Owner of the liquidity to burn.
        :param tick_lower:
            Lower bound of the liquidity to burn.
        :param tick_upper:
            Upper bound of the liquidity to burn.
        :param amount:
            Amount of liquidity to burn.
        :return: (amount_0, amount_1) credited to the position, rounded down
        """
        if amount < 0:
            raise ValidationError("Cannot Burn Negative Liquidity", RevertReason.NEGATIVE_AMOUNT)

        self.math.check_ticks(tick_lower, tick_upper, self.immutables.tick_spacing)

        position = self.positions.get(owner, tick_lower, tick_upper)
        if position is None:
            raise InsufficientError(
                f"Position ({owner}, {tick_lower}, {tick_upper}) does not exist",
                RevertReason.NO_POSITION,
            )
        if amount > position.liquidity:
            raise InsufficientError(
                f"Cannot burn {amount} liquidity from a position holding {position.liquidity}",
                RevertReason.INSUFFICIENT_LIQUIDITY,
            )

        position, amount_0, amount_1 = self._modify_position(owner, tick_lower, tick_upper, -amount)

        if amount_0 or amount_1:
            position.tokens_owed_0 += -amount_0
            position.tokens_owed_1 += -amount_1

        logger.info(
            f"Burned {amount} liquidity from ({owner}, {tick_lower}, {tick_upper}) for {-amount_0}, {-amount_1}"
        )
        return -amount_0, -amount_1

    @locked
    def collect(
        self,
        owner: ChecksumAddress,
        tick_lower: int,
        tick_upper: int,
        amount_0_requested: int,
        amount_1_requested: int,
    ) -> tuple[int, int]:
        """
        Pays out tokens owed to a position.  Requesting more than is owed pays the full amount owed.

        :param owner: Owner of the position
        :param tick_lower: Lower bound of the position
        :param tick_upper: Upper bound of the position
        :param amount_0_requested: Maximum amount of token 0 to collect
        :param amount_1_requested: Maximum amount of token 1 to collect
        :return: (amount_0, amount_1) paid out
        """
        if amount_0_requested < 0 or amount_1_requested < 0:
            raise ValidationError("Cannot collect negative amounts", RevertReason.NEGATIVE_AMOUNT)

        position = self.positions.get(owner, tick_lower, tick_upper)
        if position is None:
            return 0, 0

        amount_0 = min(amount_0_requested, position.tokens_owed_0)
        amount_1 = min(amount_1_requested, position.tokens_owed_1)

        self._record_position((owner, tick_lower, tick_upper))
        position.tokens_owed_0 -= amount_0
        position.tokens_owed_1 -= amount_1

        self.state.balance_0 -= amount_0
        self.state.balance_1 -= amount_1

        logger.info(f"Collected {amount_0}, {amount_1} from ({owner}, {tick_lower}, {tick_upper})")
        return amount_0, amount_1

    # pylint: disable=too-many-locals,too-many-branches,too-many-statements
    @locked
    def swap(
        self,
        recipient: ChecksumAddress,
        zero_for_one: bool,
        amount_specified: int,
        sqrt_price_limit: int | None = None,
        callback: SettlementCallback | None = None,
    ) -> tuple[int, int]:
        """
        Swaps tokens in the pool.

        :param recipient:
            Address receiving the output tokens.
        :param zero_for_one:
            Which direction to swap tokens.  If True, sell Token 0 and buy Token 1.  If False, sell Token 1
            and buy Token 0.
        :param amount_specified:
            Raw token amount to swap.  If amount specified is positive, this represents the quantity of tokens to
            sell.  If amount specified is negative, this represents the quantity of tokens to buy.
        :param sqrt_price_limit:
            The maximum/minimum price to allow for the swap.  If the swap would result in a price beyond this limit,
            the swap will only be executed up to the price sqrt_price_limit.  Defaults to the edge of the price
            domain in the direction of the swap.
        :param callback:
            Optional settlement hook called with the signed (amount_0, amount_1) of the swap before it completes.
            Raising from the callback aborts the swap.
        :return: (amount_in, amount_out)
        """
        return self._swap(recipient, zero_for_one, amount_specified, sqrt_price_limit, callback)

    def _swap(
        self,
        recipient: ChecksumAddress,
        zero_for_one: bool,
        amount_specified: int,
        sqrt_price_limit: int | None = None,
        callback: SettlementCallback | None = None,
    ) -> tuple[int, int]:
        if sqrt_price_limit is None:
            sqrt_price_limit = self.math.MIN_SQRT_RATIO + 1 if zero_for_one else self.math.MAX_SQRT_RATIO - 1

        logger.debug(f"------ Swapping Token {0 if zero_for_one else 1} for Token {1 if zero_for_one else 0} -------")
        logger.debug(f"Swap Amount: {amount_specified}")
        logger.debug(f"Price Limit: {sqrt_price_limit}")
        logger.debug(f"Current Price: {self.slot0.sqrt_price}")

        if amount_specified == 0:
            raise ValidationError("Cannot swap 0 tokens", RevertReason.ZERO_AMOUNT)

        if zero_for_one:
            if not self.math.MIN_SQRT_RATIO < sqrt_price_limit < self.slot0.sqrt_price:
                raise ValidationError(
                    f"sqrt_price_limit {sqrt_price_limit} must be between MIN_SQRT_RATIO and the current price",
                    RevertReason.INVALID_PRICE_LIMIT,
                )
        elif not self.slot0.sqrt_price < sqrt_price_limit < self.math.MAX_SQRT_RATIO:
            raise ValidationError(
                f"sqrt_price_limit {sqrt_price_limit} must be between the current price and MAX_SQRT_RATIO",
                RevertReason.INVALID_PRICE_LIMIT,
            )

        liquidity_start = self.state.liquidity
        exact_input = amount_specified > 0
        state = SwapState(
            amount_specified_remaining=amount_specified,
            amount_calculated=0,
            sqrt_price=self.slot0.sqrt_price,
            tick=self.slot0.tick,
            fee_growth_global=self.state.fee_growth_global_0 if zero_for_one else self.state.fee_growth_global_1,
            liquidity=liquidity_start,
        )

        while state.amount_specified_remaining != 0 and state.sqrt_price != sqrt_price_limit:
            step = SwapStep(sqrt_price_start=state.sqrt_price)
            step.tick_next, step.initialized = self.ticks.next_initialized_tick(state.tick, zero_for_one)

            step.tick_next = max(step.tick_next, self.math.MIN_TICK)
            step.tick_next = min(step.tick_next, self.math.MAX_TICK)

            step.sqrt_price_next = self.math.tick_math.get_sqrt_ratio_at_tick(step.tick_next)

            if zero_for_one:
                sqrt_price_target = max(step.sqrt_price_next, sqrt_price_limit)
            else:
                sqrt_price_target = min(step.sqrt_price_next, sqrt_price_limit)

            computed_swap_step = self.math.swap_math.compute_swap_step(
                state.sqrt_price,
                sqrt_price_target,
                state.liquidity,
                state.amount_specified_remaining,
                self.immutables.fee,
            )
            state.sqrt_price = computed_swap_step.sqrt_price_next
            step.amount_in = computed_swap_step.amount_in
            step.amount_out = computed_swap_step.amount_out
            step.fee_amount = computed_swap_step.fee_amount

            logger.debug(
                f"Swap Step: tick_next={step.tick_next}, sqrt_price={state.sqrt_price}, amount_in={step.amount_in}, "
                f"amount_out={step.amount_out}, fee={step.fee_amount}, liquidity={state.liquidity}"
            )

            if exact_input:
                state.amount_specified_remaining -= step.amount_in + step.fee_amount
                state.amount_calculated -= step.amount_out
            else:
                state.amount_specified_remaining += step.amount_out
                state.amount_calculated += step.amount_in + step.fee_amount

            if state.liquidity > 0:
                state.fee_growth_global = uint_over_under_flow(
                    state.fee_growth_global
                    + self.math.full_math.mul_div(step.fee_amount, self.math.Q128, state.liquidity),
                    256,
                )

            if state.sqrt_price == step.sqrt_price_next:
                # price reached the tick boundary, cross it if it is initialized
                if step.initialized:
                    self._record_tick(step.tick_next)
                    liquidity_net = self.ticks.cross(
                        step.tick_next,
                        state.fee_growth_global if zero_for_one else self.state.fee_growth_global_0,
                        self.state.fee_growth_global_1 if zero_for_one else state.fee_growth_global,
                    )
                    logger.debug(f"Crossing Tick {step.tick_next}, liquidity_net: {liquidity_net}")

                    state.liquidity = self.math.liquidity_math.add_delta(
                        state.liquidity,
                        -liquidity_net if zero_for_one else liquidity_net,
                    )
                state.tick = step.tick_next - 1 if zero_for_one else step.tick_next

            elif state.sqrt_price != step.sqrt_price_start:
                state.tick = self.math.tick_math.get_tick_at_sqrt_ratio(state.sqrt_price)

        self.slot0.sqrt_price = state.sqrt_price
        self.slot0.tick = state.tick

        if liquidity_start != state.liquidity:
            self.state.liquidity = state.liquidity

        if zero_for_one:
            self.state.fee_growth_global_0 = state.fee_growth_global
        else:
            self.state.fee_growth_global_1 = state.fee_growth_global

        if zero_for_one == exact_input:
            amount_0, amount_1 = amount_specified - state.amount_specified_remaining, state.amount_calculated
        else:
            amount_0, amount_1 = state.amount_calculated, amount_specified - state.amount_specified_remaining

        if callback is not None:
            callback(amount_0, amount_1)

        self.state.balance_0 += amount_0
        self.state.balance_1 += amount_1

        amount_in, amount_out = (amount_0, -amount_1) if zero_for_one else (amount_1, -amount_0)

        logger.info(
            f"Swapped {amount_in} Token {0 if zero_for_one else 1} for {amount_out} "
            f"Token {1 if zero_for_one else 0} to {recipient}"
        )
        logger.debug(f"Current Tick: {self.slot0.tick}\tCurrent Liquidity: {self.state.liquidity}")

        return amount_in, amount_out

    # pylint: enable=too-many-locals,too-many-branches,too-many-statements

    # -----------------------------------------------------------------------------------------------------------
    # Internal Position Methods
    # -----------------------------------------------------------------------------------------------------------

    def _update_position(
        self,
        owner: ChecksumAddress,
        tick_lower: int,
        tick_upper: int,
        liquidity_delta: int,
        tick_current: int,
    ) -> PositionInfo:
        self._record_position((owner, tick_lower, tick_upper))
        position = self.positions.get_or_create(owner, tick_lower, tick_upper)

        if liquidity_delta != 0:
            for tick, upper in ((tick_lower, False), (tick_upper, True)):
                self._record_tick(tick)
                self.ticks.update(
                    tick,
                    tick_current,
                    liquidity_delta,
                    self.state.fee_growth_global_0,
                    self.state.fee_growth_global_1,
                    upper,
                    self.immutables.max_liquidity_per_tick,
                )

        fee_growth_inside_0, fee_growth_inside_1 = self.ticks.get_fee_growth_inside(
            tick_lower,
            tick_upper,
            tick_current,
            self.state.fee_growth_global_0,
            self.state.fee_growth_global_1,
        )

        return self.positions.update(position, liquidity_delta, fee_growth_inside_0, fee_growth_inside_1)

    def _modify_position(
        self,
        owner: ChecksumAddress,
        tick_lower: int,
        tick_upper: int,
        liquidity_delta: int,
    ) -> tuple[PositionInfo, int, int]:
        self.math.check_ticks(tick_lower, tick_upper, self.immutables.tick_spacing)

        position = self._update_position(owner, tick_lower, tick_upper, liquidity_delta, self.slot0.tick)

        amount_0, amount_1 = 0, 0
        if liquidity_delta == 0:
            return position, amount_0, amount_1

        sqrt_price_lower = self.math.tick_math.get_sqrt_ratio_at_tick(tick_lower)
        sqrt_price_upper = self.math.tick_math.get_sqrt_ratio_at_tick(tick_upper)
        sqrt_price_math = self.math.sqrt_price_math

        if self.slot0.tick < tick_lower:
            # range is above the current price, only token 0 is required
            amount_0 = sqrt_price_math.get_amount_0_delta(sqrt_price_lower, sqrt_price_upper, liquidity_delta)
        elif self.slot0.tick < tick_upper:
            amount_0 = sqrt_price_math.get_amount_0_delta(self.slot0.sqrt_price, sqrt_price_upper, liquidity_delta)
            amount_1 = sqrt_price_math.get_amount_1_delta(sqrt_price_lower, self.slot0.sqrt_price, liquidity_delta)
            self.state.liquidity = self.math.liquidity_math.add_delta(self.state.liquidity, liquidity_delta)
        else:
            # range is below the current price, only token 1 is required
            amount_1 = sqrt_price_math.get_amount_1_delta(sqrt_price_lower, sqrt_price_upper, liquidity_delta)

        return position, amount_0, amount_1
