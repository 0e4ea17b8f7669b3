import logging

import pytest

from nethermind.clamm.exceptions import (
    InsufficientError,
    LiquidityMathRevert,
    RevertReason,
    StateError,
    ValidationError,
)
from nethermind.clamm.pool import ConcentratedLiquidityPool
from nethermind.clamm.pool.math import MAX_SQRT_RATIO, MIN_SQRT_RATIO
from nethermind.clamm.tokens import NULL_TOKEN

from .utils import MAX_TICK, MIN_TICK, encode_sqrt_price


class TestPoolInitialization:
    def test_initializes_immutables(self):
        pool = ConcentratedLiquidityPool()

        assert pool.immutables.pool_address is not None
        assert pool.immutables.token_0 == NULL_TOKEN
        assert pool.immutables.token_1 == NULL_TOKEN
        assert pool.immutables.tick_spacing == 60
        assert pool.immutables.fee == 3000
        assert pool.immutables.max_liquidity_per_tick == 11505743598341114571880798222544994

    def test_pool_is_uninitialized_without_price(self):
        pool = ConcentratedLiquidityPool()

        assert not pool.initialized
        assert pool.slot0.sqrt_price == 0
        assert pool.state.liquidity == 0

    def test_initialization_args_are_passed_to_pool(self):
        pool = ConcentratedLiquidityPool(initial_price=encode_sqrt_price(1, 10), fee=500)

        assert pool.immutables.fee == 500
        assert pool.immutables.tick_spacing == 10
        assert pool.slot0.sqrt_price == encode_sqrt_price(1, 10)
        assert pool.slot0.tick == -23028
        assert pool.initialized

    def test_tick_spacing_selects_fee(self):
        pool = ConcentratedLiquidityPool(tick_spacing=200)
        assert pool.immutables.fee == 10000

    def test_initial_tick(self):
        pool = ConcentratedLiquidityPool(initial_tick=-600)

        assert pool.slot0.tick == -600
        assert pool.slot0.sqrt_price == pool.math.tick_math.get_sqrt_ratio_at_tick(-600)

    def test_warning_is_raised_for_fee_tick_spacing_mismatch(self, caplog):
        with caplog.at_level(logging.WARN):
            ConcentratedLiquidityPool(fee=1000, tick_spacing=200)

        expected_warn = (
            "Tick spacing & Fee were both specified, but do not match typical values\tFee: 1000, Tick Spacing: 200"
        )
        assert expected_warn in [record.message for record in caplog.records]

    def test_raises_for_nonstandard_fee_without_tick_spacing(self):
        with pytest.raises(ValidationError) as exc_info:
            ConcentratedLiquidityPool(fee=1234)

        assert exc_info.value.reason == RevertReason.INVALID_POOL_PARAMETERS

    def test_raises_for_invalid_tick_spacing(self):
        with pytest.raises(ValidationError):
            ConcentratedLiquidityPool(fee=1234, tick_spacing=0)

    def test_raises_if_initialization_price_too_low(self):
        with pytest.raises(ValidationError) as exc_info:
            ConcentratedLiquidityPool(initial_price=MIN_SQRT_RATIO - 1)

        assert exc_info.value.reason == RevertReason.INVALID_SQRT_PRICE

    def test_raises_if_initialization_price_too_high(self):
        with pytest.raises(ValidationError):
            ConcentratedLiquidityPool(initial_price=MAX_SQRT_RATIO)

    def test_can_initialize_at_min_sqrt_ratio(self):
        pool = ConcentratedLiquidityPool(initial_price=MIN_SQRT_RATIO)
        assert pool.slot0.tick == pool.math.MIN_TICK

    def test_can_initialize_at_max_sqrt_ratio_minus_one(self):
        pool = ConcentratedLiquidityPool(initial_price=MAX_SQRT_RATIO - 1)
        assert pool.slot0.tick == pool.math.MAX_TICK - 1

    def test_raises_if_already_initialized(self):
        pool = ConcentratedLiquidityPool(initial_price=encode_sqrt_price(1, 1))

        with pytest.raises(StateError) as exc_info:
            pool.initialize(encode_sqrt_price(1, 2))

        assert exc_info.value.reason == RevertReason.ALREADY_INITIALIZED
        assert pool.slot0.sqrt_price == encode_sqrt_price(1, 1)

    def test_operations_fail_before_initialization(self, random_address):
        pool = ConcentratedLiquidityPool()
        owner = random_address()

        for operation in (
            lambda: pool.mint(owner, -60, 60, 100),
            lambda: pool.burn(owner, -60, 60, 0),
            lambda: pool.collect(owner, -60, 60, 1, 1),
            lambda: pool.swap(owner, True, 100),
        ):
            with pytest.raises(StateError) as exc_info:
                operation()
            assert exc_info.value.reason == RevertReason.NOT_INITIALIZED

        assert not pool.slot0.locked


class TestMint:
    def test_mint_fails_if_tick_lower_is_higher_than_tick_upper(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        with pytest.raises(ValidationError) as exc_info:
            pool.mint(random_address(), 120, 60, 100)

        assert exc_info.value.reason == RevertReason.INVALID_TICK_RANGE

    def test_mint_fails_if_tick_lower_is_equal_to_tick_upper(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        with pytest.raises(ValidationError) as exc_info:
            pool.mint(random_address(), MIN_TICK[60], MIN_TICK[60], 100)

        assert exc_info.value.reason == RevertReason.INVALID_TICK_RANGE

    def test_mint_fails_if_tick_is_not_multiple_of_spacing(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        with pytest.raises(ValidationError) as exc_info:
            pool.mint(random_address(), -61, 60, 100)

        assert exc_info.value.reason == RevertReason.INVALID_TICK

    def test_mint_fails_if_tick_lower_less_than_min_tick(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        with pytest.raises(ValidationError) as exc_info:
            pool.mint(random_address(), MIN_TICK[60] - 60, MAX_TICK[60], 100)

        assert exc_info.value.reason == RevertReason.INVALID_TICK

    def test_mint_fails_if_tick_upper_greater_than_max_tick(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        with pytest.raises(ValidationError):
            pool.mint(random_address(), MIN_TICK[60], MAX_TICK[60] + 60, 100)

    def test_mint_fails_if_amount_is_zero(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        with pytest.raises(ValidationError) as exc_info:
            pool.mint(random_address(), MIN_TICK[60], MAX_TICK[60], 0)

        assert exc_info.value.reason == RevertReason.ZERO_LIQUIDITY

    def test_mint_fails_if_amount_exceeds_max(self, initialize_empty_pool, random_address):
        minter_address = random_address()
        pool = initialize_empty_pool()

        with pytest.raises(LiquidityMathRevert) as exc_info:
            pool.mint(minter_address, MIN_TICK[60], MAX_TICK[60], pool.immutables.max_liquidity_per_tick + 1)

        assert exc_info.value.reason == RevertReason.TICK_LIQUIDITY_OVERFLOW
        pool.mint(minter_address, MIN_TICK[60], MAX_TICK[60], pool.immutables.max_liquidity_per_tick)

    def test_mint_fails_if_amount_exceeds_max_over_two_mints(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        minter_address = random_address()
        pool.mint(minter_address, MIN_TICK[60], MAX_TICK[60], pool.immutables.max_liquidity_per_tick - 1000)

        with pytest.raises(LiquidityMathRevert):
            pool.mint(minter_address, MIN_TICK[60], MAX_TICK[60], 1001)

        pool.mint(minter_address, MIN_TICK[60], MAX_TICK[60], 1000)
        assert pool.positions[(minter_address, MIN_TICK[60], MAX_TICK[60])].liquidity == (
            pool.immutables.max_liquidity_per_tick
        )

    def test_failed_mint_does_not_modify_pool(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        minter_address = random_address()

        with pytest.raises(LiquidityMathRevert):
            pool.mint(minter_address, MIN_TICK[60], MAX_TICK[60], pool.immutables.max_liquidity_per_tick + 1)

        assert len(pool.ticks) == 0
        assert len(pool.positions) == 0
        assert pool.state.liquidity == 0
        assert pool.state.balance_0 == 0
        assert pool.state.balance_1 == 0
        assert not pool.slot0.locked

    def test_mint_initial_price(self, initialize_mint_test_pool):
        pool, _ = initialize_mint_test_pool(tick_spacing=60)

        assert pool.state.balance_0 == 9996
        assert pool.state.balance_1 == 1000
        assert pool.slot0.tick == -23028
        assert pool.state.liquidity == 3161

    def test_mint_above_current_price(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        amount_0, amount_1 = pool.mint(minter_address, -22980, 0, 10000)

        assert (amount_0, amount_1) == (21549, 0)
        assert pool.state.balance_0 == 9996 + 21549
        assert pool.state.balance_1 == 1000
        assert pool.state.liquidity == 3161

    def test_mint_max_tick_max_leverage(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        pool.mint(minter_address, MAX_TICK[60] - 60, MAX_TICK[60], 2**102)

        assert pool.state.balance_0 == 9996 + 828011525
        assert pool.state.balance_1 == 1000

    def test_mint_works_with_max_tick(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        pool.mint(minter_address, -22980, MAX_TICK[60], 10000)

        assert pool.state.balance_0 == 9996 + 31549
        assert pool.state.balance_1 == 1000

    def test_mint_within_price_range_transfers_both_tokens(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        pool.mint(minter_address, MIN_TICK[60] + 60, MAX_TICK[60] - 60, 100)

        assert pool.state.balance_0 == 9996 + 317
        assert pool.state.balance_1 == 1000 + 32
        assert pool.state.liquidity == 3161 + 100

    def test_mint_within_price_range_initializes_ticks(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        pool.mint(minter_address, MIN_TICK[60] + 60, MAX_TICK[60] - 60, 100)

        assert pool.ticks[MIN_TICK[60] + 60].liquidity_gross == 100
        assert pool.ticks[MAX_TICK[60] - 60].liquidity_gross == 100
        assert pool.ticks[MIN_TICK[60] + 60].initialized

    def test_mint_additional_liquidity_min_max_ticks(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        pool.mint(minter_address, MIN_TICK[60], MAX_TICK[60], 10000)

        assert pool.state.balance_0 == 9996 + 31623
        assert pool.state.balance_1 == 1000 + 3163

    def test_mint_below_current_price(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        amount_0, amount_1 = pool.mint(minter_address, -46080, -23040, 10000)

        assert (amount_0, amount_1) == (0, 2162)
        assert pool.state.balance_0 == 9996
        assert pool.state.balance_1 == 1000 + 2162
        assert pool.state.liquidity == 3161

    def test_mint_min_tick_with_max_leverage(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        pool.mint(minter_address, MIN_TICK[60], MIN_TICK[60] + 60, 2**102)

        assert pool.state.balance_0 == 9996
        assert pool.state.balance_1 == 1000 + 828011520

    def test_mint_min_tick(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        pool.mint(minter_address, MIN_TICK[60], -23040, 10000)

        assert pool.state.balance_0 == 9996
        assert pool.state.balance_1 == 1000 + 3161

    def test_mint_adds_liquidity_to_liquidity_gross(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        minter_address = random_address()

        pool.mint(minter_address, -240, 0, 100)
        assert pool.ticks[-240].liquidity_gross == 100
        assert pool.ticks[0].liquidity_gross == 100
        assert 60 not in pool.ticks
        assert 120 not in pool.ticks

        pool.mint(minter_address, -240, 60, 150)
        assert pool.ticks[-240].liquidity_gross == 250
        assert pool.ticks[0].liquidity_gross == 100
        assert pool.ticks[60].liquidity_gross == 150
        assert 120 not in pool.ticks

        pool.mint(minter_address, 0, 120, 60)
        assert pool.ticks[-240].liquidity_gross == 250
        assert pool.ticks[0].liquidity_gross == 160
        assert pool.ticks[60].liquidity_gross == 150
        assert pool.ticks[120].liquidity_gross == 60

    def test_mint_callback_receives_owed_amounts(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)
        received = []

        amounts = pool.mint(
            minter_address, MIN_TICK[60], MAX_TICK[60], 10000, callback=lambda a0, a1: received.append((a0, a1))
        )

        assert received == [(31623, 3163)]
        assert amounts == (31623, 3163)


class TestBurn:
    def test_removing_mint_succeeds(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        pool.mint(minter_address, -240, 0, 10000)
        amount_0, amount_1 = pool.burn(minter_address, -240, 0, 10000)

        assert amount_0 == 120
        assert amount_1 == 0

    def test_removing_liquidity_min_max_ticks(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        pool.mint(minter_address, MIN_TICK[60], MAX_TICK[60], 100)
        amount_0, amount_1 = pool.burn(minter_address, MIN_TICK[60], MAX_TICK[60], 100)

        assert amount_0 == 316
        assert amount_1 == 31

    def test_removing_min_tick_liquidity(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        pool.mint(minter_address, -46080, -46020, 10000)
        amount_0, amount_1 = pool.burn(minter_address, -46080, -46020, 10000)

        assert amount_0 == 0
        assert amount_1 == 3

    def test_burn_credits_tokens_owed_without_moving_balances(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)
        pool.mint(minter_address, -240, 0, 10000)
        balances = (pool.state.balance_0, pool.state.balance_1)

        pool.burn(minter_address, -240, 0, 10000)

        position = pool.positions[(minter_address, -240, 0)]
        assert position.liquidity == 0
        assert position.tokens_owed_0 == 120
        assert position.tokens_owed_1 == 0
        assert (pool.state.balance_0, pool.state.balance_1) == balances

    def test_burn_removes_from_liquidity_gross(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        minter_address = random_address()

        pool.mint(minter_address, -240, 0, 100)
        pool.mint(minter_address, -240, 60, 40)
        pool.burn(minter_address, -240, 0, 90)

        assert pool.ticks[-240].liquidity_gross == 50
        assert pool.ticks[0].liquidity_gross == 10

    def test_burn_uninitializes_tick_if_liquidity_gross_goes_to_zero(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        minter_address = random_address()

        pool.mint(minter_address, -240, 0, 100)
        pool.burn(minter_address, -240, 0, 100)

        for tick in (-240, 0):
            assert not pool.ticks[tick].initialized
            assert pool.ticks[tick].liquidity_gross == 0
            assert pool.ticks[tick].liquidity_net == 0
        assert pool.ticks.initialized_ticks == []

    def test_uninitializes_tick_that_is_not_used(self, initialize_empty_pool, random_address):
        pool = initialize_empty_pool()
        minter_address = random_address()

        pool.mint(minter_address, -240, 0, 100)
        pool.mint(minter_address, -60, 0, 250)
        pool.burn(minter_address, -240, 0, 100)

        assert not pool.ticks[-240].initialized
        assert pool.ticks[-60].liquidity_gross == 250
        assert pool.ticks[-60].fee_growth_outside_0 == 0
        assert pool.ticks[-60].fee_growth_outside_1 == 0

    def test_burn_fails_if_amount_exceeds_position_liquidity(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)
        pool.mint(minter_address, -240, 0, 100)

        with pytest.raises(InsufficientError) as exc_info:
            pool.burn(minter_address, -240, 0, 101)

        assert exc_info.value.reason == RevertReason.INSUFFICIENT_LIQUIDITY
        assert pool.positions[(minter_address, -240, 0)].liquidity == 100
        assert pool.ticks[-240].liquidity_gross == 100

    def test_burn_fails_for_missing_position(self, initialize_mint_test_pool, random_address):
        pool, _ = initialize_mint_test_pool(tick_spacing=60)

        with pytest.raises(InsufficientError) as exc_info:
            pool.burn(random_address(), -240, 0, 1)

        assert exc_info.value.reason == RevertReason.NO_POSITION

    def test_burn_fails_for_negative_amount(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        with pytest.raises(ValidationError) as exc_info:
            pool.burn(minter_address, MIN_TICK[60], MAX_TICK[60], -1)

        assert exc_info.value.reason == RevertReason.NEGATIVE_AMOUNT

    def test_poke_is_not_allowed_on_uninitialized_position(self, initialize_mint_test_pool, random_address):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)
        other_address = random_address()

        with pytest.raises(InsufficientError):
            pool.burn(other_address, MIN_TICK[60], MAX_TICK[60], 0)

        pool.mint(minter_address, -240, 0, 100)
        pool.burn(minter_address, -240, 0, 100)

        with pytest.raises(InsufficientError) as exc_info:
            pool.burn(minter_address, -240, 0, 0)

        assert exc_info.value.reason == RevertReason.NO_POSITION

    def test_poke_returns_zero_amounts(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        assert pool.burn(minter_address, MIN_TICK[60], MAX_TICK[60], 0) == (0, 0)
        assert pool.positions[(minter_address, MIN_TICK[60], MAX_TICK[60])].liquidity == 3161

    def test_burning_minted_liquidity_returns_at_most_deposit(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        minted = pool.mint(minter_address, -24000, -21960, 123456789)
        burned = pool.burn(minter_address, -24000, -21960, 123456789)

        assert 0 <= minted[0] - burned[0] <= 1
        assert 0 <= minted[1] - burned[1] <= 1
        assert pool.positions[(minter_address, -24000, -21960)].liquidity == 0
        assert pool.state.liquidity == 3161


class TestCollect:
    def test_collect_pays_tokens_owed(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)
        pool.mint(minter_address, -240, 0, 10000)
        pool.burn(minter_address, -240, 0, 10000)
        balance_0 = pool.state.balance_0

        assert pool.collect(minter_address, -240, 0, 2**128 - 1, 2**128 - 1) == (120, 0)
        assert pool.state.balance_0 == balance_0 - 120
        assert pool.positions[(minter_address, -240, 0)].tokens_owed_0 == 0

    def test_collect_partial_amounts(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)
        pool.mint(minter_address, -240, 0, 10000)
        pool.burn(minter_address, -240, 0, 10000)

        assert pool.collect(minter_address, -240, 0, 20, 0) == (20, 0)
        assert pool.positions[(minter_address, -240, 0)].tokens_owed_0 == 100
        assert pool.collect(minter_address, -240, 0, 500, 500) == (100, 0)
        assert pool.collect(minter_address, -240, 0, 500, 500) == (0, 0)

    def test_collect_from_missing_position_pays_nothing(self, initialize_mint_test_pool, random_address):
        pool, _ = initialize_mint_test_pool(tick_spacing=60)

        assert pool.collect(random_address(), -240, 0, 100, 100) == (0, 0)

    def test_collect_rejects_negative_requests(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        with pytest.raises(ValidationError) as exc_info:
            pool.collect(minter_address, MIN_TICK[60], MAX_TICK[60], -1, 0)

        assert exc_info.value.reason == RevertReason.NEGATIVE_AMOUNT

    def test_collect_does_not_change_liquidity(self, initialize_mint_test_pool):
        pool, minter_address = initialize_mint_test_pool(tick_spacing=60)

        pool.collect(minter_address, MIN_TICK[60], MAX_TICK[60], 100, 100)

        assert pool.state.liquidity == 3161
        assert pool.positions[(minter_address, MIN_TICK[60], MAX_TICK[60])].liquidity == 3161
