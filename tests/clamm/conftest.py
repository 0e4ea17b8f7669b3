from typing import Optional, Tuple

import pytest
from eth_typing import ChecksumAddress

from nethermind.clamm.pool import ConcentratedLiquidityPool

from .utils import MAX_TICK, MIN_TICK, encode_sqrt_price


@pytest.fixture(name="initialize_empty_pool")
def fixture_initialize_empty_pool():
    def _initialize_empty_pool(
        tick_spacing: Optional[int] = 60,
        fee: Optional[int] = 3_000,
        **kwargs,
    ):
        kwargs.setdefault("initial_price", encode_sqrt_price(1, 1))
        return ConcentratedLiquidityPool(
            tick_spacing=tick_spacing,
            fee=fee,
            **kwargs,
        )

    return _initialize_empty_pool


@pytest.fixture(name="initialize_mint_test_pool")
def fixture_initialize_mint_test_pool(random_address):
    def _initialize_mint_test_pool(
        tick_spacing: int = 60, **kwargs
    ) -> Tuple[ConcentratedLiquidityPool, ChecksumAddress]:
        minter_address = random_address()

        mint_test_pool = ConcentratedLiquidityPool(
            tick_spacing=tick_spacing,
            initial_price=encode_sqrt_price(1, 10),
            **kwargs,
        )

        mint_test_pool.mint(minter_address, MIN_TICK[tick_spacing], MAX_TICK[tick_spacing], 3161)
        return mint_test_pool, minter_address

    return _initialize_mint_test_pool


@pytest.fixture(name="initialize_swap_test_pool")
def fixture_initialize_swap_test_pool(random_address):
    def _initialize_swap_test_pool(
        liquidity: int = 1_000_000, tick_lower: int = -600, tick_upper: int = 600, **kwargs
    ) -> Tuple[ConcentratedLiquidityPool, ChecksumAddress]:
        provider_address = random_address()

        swap_test_pool = ConcentratedLiquidityPool(fee=3000, tick_spacing=60, initial_tick=0, **kwargs)
        swap_test_pool.mint(provider_address, tick_lower, tick_upper, liquidity)
        return swap_test_pool, provider_address

    return _initialize_swap_test_pool
