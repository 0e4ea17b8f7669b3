import logging
import os
from logging import Logger

import click
from rich.console import Console
from rich.logging import RichHandler

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("clamm").getChild("cli")


def cli_logger_config(instrument_logger: Logger, verbose: bool = False) -> Console:
    rich_console = Console()
    instrument_logger.handlers.clear()

    instrument_logger.addHandler(RichHandler(show_path=False, console=rich_console))
    instrument_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return rich_console


def group_options(*options):
    """Decorator to group multiple click options together"""

    def wrapper(function):
        for option in reversed(options):
            function = option(function)
        return function

    return wrapper


# -------------------------------------------------------
#    Pool Configuration
# -------------------------------------------------------
fee_option = click.option(
    "--fee",
    "fee",
    type=int,
    default=os.environ.get("CLAMM_FEE"),
    help="Swap fee in hundredths of a bip.  If not provided, will use the CLAMM_FEE environment variable, "
    "or the standard fee of the tick spacing",
)
tick_spacing_option = click.option(
    "--tick-spacing",
    "tick_spacing",
    type=int,
    default=os.environ.get("CLAMM_TICK_SPACING"),
    help="Tick spacing of the pool.  If not provided, will use the CLAMM_TICK_SPACING environment variable, "
    "or the standard spacing of the fee tier",
)
decimals_0_option = click.option(
    "--decimals-0",
    "decimals_0",
    type=int,
    default=18,
    show_default=True,
    help="Decimals of token 0",
)
decimals_1_option = click.option(
    "--decimals-1",
    "decimals_1",
    type=int,
    default=18,
    show_default=True,
    help="Decimals of token 1",
)
reverse_tokens_option = click.option(
    "--reverse-tokens",
    is_flag=True,
    default=False,
    help="Quote prices as token 0 per token 1",
)

# -------------------------------------------------------
#    Simulation Parameters
# -------------------------------------------------------
tick_option = click.option(
    "--tick",
    "tick",
    type=int,
    default=0,
    show_default=True,
    help="Tick to initialize the pool at",
)
tick_lower_option = click.option(
    "--tick-lower",
    "tick_lower",
    type=int,
    default=-600,
    show_default=True,
    help="Lower tick of the minted position",
)
tick_upper_option = click.option(
    "--tick-upper",
    "tick_upper",
    type=int,
    default=600,
    show_default=True,
    help="Upper tick of the minted position",
)
liquidity_option = click.option(
    "--liquidity",
    "liquidity",
    type=int,
    default=1_000_000,
    show_default=True,
    help="Liquidity to mint into the position",
)
amount_option = click.option(
    "--amount",
    "amount",
    type=int,
    default=10_000,
    show_default=True,
    help="Raw token amount to swap.  Positive amounts are exact inputs, negative amounts are exact outputs",
)
one_for_zero_option = click.option(
    "--one-for-zero",
    is_flag=True,
    default=False,
    help="Sell token 1 for token 0.  By default, token 0 is sold for token 1",
)
save_file_option = click.option(
    "--save-file",
    "save_file",
    type=click.Path(writable=True),
    help="File to save the resulting pool state as JSON",
)
verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Log every swap step",
)
