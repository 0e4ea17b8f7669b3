import click

from nethermind.clamm.cli.simulate import price_to_tick, simulate, tick_to_price


@click.group()
def clamm_cli():
    """Command Line Interface for the Nethermind Concentrated Liquidity Pool Engine"""


# Adding Commands
clamm_cli.add_command(tick_to_price, name="tick-to-price")
clamm_cli.add_command(price_to_tick, name="price-to-tick")
clamm_cli.add_command(simulate, name="simulate")
