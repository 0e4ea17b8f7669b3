from decimal import Decimal, localcontext

from nethermind.clamm.pool.math import MAX_TICK as ABSOLUTE_MAX_TICK

MIN_TICK = {spacing: -(ABSOLUTE_MAX_TICK // spacing) * spacing for spacing in (1, 10, 60, 200)}
MAX_TICK = {spacing: (ABSOLUTE_MAX_TICK // spacing) * spacing for spacing in (1, 10, 60, 200)}


def encode_sqrt_price(reserve_1: int, reserve_0: int) -> int:
    """Encodes the price reserve_1 / reserve_0 as a Q64.96 sqrt price"""
    with localcontext() as ctx:
        ctx.prec = 80
        return int((Decimal(reserve_1) / Decimal(reserve_0)).sqrt() * (2**96))


def decode_sqrt_price(sqrt_price: int) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = 80
        return (Decimal(sqrt_price) / (2**96)) ** 2


def expand_to_decimals(num: int, decimals: int = 18) -> int:
    return (10**decimals) * num


def uint_max(bits: int) -> int:
    return 2**bits - 1
