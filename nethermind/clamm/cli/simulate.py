import logging

import click
from rich.table import Table

from .utils import (
    amount_option,
    decimals_0_option,
    decimals_1_option,
    fee_option,
    group_options,
    liquidity_option,
    one_for_zero_option,
    reverse_tokens_option,
    save_file_option,
    tick_lower_option,
    tick_option,
    tick_spacing_option,
    tick_upper_option,
    verbose_option,
)

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("clamm").getChild("simulate")

# isort: skip_file
# pylint: disable=too-many-arguments,import-outside-toplevel,too-many-locals

SIMULATION_OWNER = "0x000000000000000000000000000000000000dEaD"


def _pool_tokens(decimals_0: int, decimals_1: int):
    from nethermind.clamm.tokens import ERC20Token

    return (
        ERC20Token(name="Token 0", symbol="TK0", decimals=decimals_0, address="0x" + "00" * 19 + "01"),
        ERC20Token(name="Token 1", symbol="TK1", decimals=decimals_1, address="0x" + "00" * 19 + "02"),
    )


@click.command("tick-to-price")
@click.argument("tick", type=int)
@group_options(decimals_0_option, decimals_1_option, reverse_tokens_option)
def tick_to_price(tick: int, decimals_0: int, decimals_1: int, reverse_tokens: bool):
    """Print the sqrt price and the human-readable price at a tick"""
    from nethermind.clamm.pool import ConcentratedLiquidityPool

    token_0, token_1 = _pool_tokens(decimals_0, decimals_1)
    pool = ConcentratedLiquidityPool(token_0=token_0, token_1=token_1)

    sqrt_price = pool.math.tick_math.get_sqrt_ratio_at_tick(tick)
    click.echo(f"Sqrt Price X96: {sqrt_price}")
    click.echo(f"Price: {pool.get_formatted_price_at_sqrt_ratio(sqrt_price, reverse_tokens)}")


@click.command("price-to-tick")
@click.argument("price", type=str)
@group_options(decimals_0_option, decimals_1_option, reverse_tokens_option)
def price_to_tick(price: str, decimals_0: int, decimals_1: int, reverse_tokens: bool):
    """Print the tick containing a human-readable price"""
    from decimal import Decimal
    from nethermind.clamm.pool import ConcentratedLiquidityPool

    token_0, token_1 = _pool_tokens(decimals_0, decimals_1)
    pool = ConcentratedLiquidityPool(token_0=token_0, token_1=token_1)

    sqrt_price = pool.get_sqrt_ratio_at_price(Decimal(price), reverse_tokens)
    click.echo(f"Sqrt Price X96: {sqrt_price}")
    click.echo(f"Tick: {pool.math.tick_math.get_tick_at_sqrt_ratio(sqrt_price)}")


@click.command("simulate")
@group_options(
    fee_option,
    tick_spacing_option,
    tick_option,
    tick_lower_option,
    tick_upper_option,
    liquidity_option,
    amount_option,
    one_for_zero_option,
    save_file_option,
    verbose_option,
)
def simulate(
    fee: int | None,
    tick_spacing: int | None,
    tick: int,
    tick_lower: int,
    tick_upper: int,
    liquidity: int,
    amount: int,
    one_for_zero: bool,
    save_file: str | None,
    verbose: bool,
):
    """
    Create a pool, mint a single position, and execute a swap against it
    """
    from nethermind.clamm.cli.utils import cli_logger_config
    from nethermind.clamm.exceptions import PoolRevert
    from nethermind.clamm.pool import ConcentratedLiquidityPool

    console = cli_logger_config(root_logger, verbose)

    try:
        pool = ConcentratedLiquidityPool(fee=fee, tick_spacing=tick_spacing, initial_tick=tick)
        mint_0, mint_1 = pool.mint(SIMULATION_OWNER, tick_lower, tick_upper, liquidity)
        start_tick = pool.slot0.tick
        amount_in, amount_out = pool.swap(SIMULATION_OWNER, not one_for_zero, amount)
    except PoolRevert as exc:
        logger.error(f"Simulation reverted ({exc.reason.value if exc.reason else 'unknown'}): {exc}")
        raise SystemExit(1) from exc

    result_table = Table(title=f"Simulation Result for {pool}", min_width=80)
    result_table.add_column("Key")
    result_table.add_column("Value", justify="right")

    for key, value in [
        ("Mint Amount 0", f"{mint_0:,}"),
        ("Mint Amount 1", f"{mint_1:,}"),
        ("Amount In", f"{amount_in:,}"),
        ("Amount Out", f"{amount_out:,}"),
        ("Start Tick", f"{start_tick}"),
        ("End Tick", f"{pool.slot0.tick}"),
        ("Sqrt Price X96", f"{pool.slot0.sqrt_price}"),
        ("Active Liquidity", f"{pool.state.liquidity:,}"),
        ("Fee Growth 0", f"{pool.state.fee_growth_global_0}"),
        ("Fee Growth 1", f"{pool.state.fee_growth_global_1}"),
    ]:
        result_table.add_row(f"[green]{key}", value)

    console.print(result_table)

    if save_file:
        with open(save_file, "w", encoding="utf-8") as write_file:
            pool.save_pool(write_file)
        console.print(f"[bold green]Pool state saved to {save_file}")
