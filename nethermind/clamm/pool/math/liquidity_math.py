from nethermind.clamm.exceptions import LiquidityMathRevert, RevertReason

from .full_math import FullMathModule
from .shared import SQRT_Q96, UINT_128_MAX


class LiquidityMathModule:
    """
    Module for converting between liquidity and token amounts, and for checked liquidity arithmetic
    """

    full_math = FullMathModule

    @classmethod
    def add_delta(cls, liquidity: int, delta: int) -> int:
        """
        Adds a signed liquidity delta to an unsigned liquidity value.

        :param liquidity: current uint128 liquidity
        :param delta: signed change in liquidity
        :return: liquidity + delta
        :raises LiquidityMathRevert: if the result is negative or exceeds UINT_128_MAX
        """
        result = liquidity + delta
        if result < 0:
            raise LiquidityMathRevert(
                f"Liquidity underflow: {liquidity} + {delta}",
                RevertReason.LIQUIDITY_UNDERFLOW,
            )
        if result > UINT_128_MAX:
            raise LiquidityMathRevert(
                f"Liquidity overflow: {liquidity} + {delta}",
                RevertReason.LIQUIDITY_OVERFLOW,
            )
        return result

    @classmethod
    def get_liquidity_for_amount_0(cls, sqrt_price_a: int, sqrt_price_b: int, amount_0: int) -> int:
        """
        Computes the liquidity received for an amount of token 0 across a price range.
        Calculates amount_0 * (sqrt(upper) * sqrt(lower)) / (sqrt(upper) - sqrt(lower))

        :param sqrt_price_a: either bound of the price range
        :param sqrt_price_b: the other bound of the price range
        :param amount_0: amount of token 0 being deposited
        :return: liquidity, rounded down
        """
        if sqrt_price_a > sqrt_price_b:
            sqrt_price_a, sqrt_price_b = sqrt_price_b, sqrt_price_a
        intermediate = cls.full_math.mul_div(sqrt_price_a, sqrt_price_b, SQRT_Q96)
        return _to_uint_128(cls.full_math.mul_div(amount_0, intermediate, sqrt_price_b - sqrt_price_a))

    @classmethod
    def get_liquidity_for_amount_1(cls, sqrt_price_a: int, sqrt_price_b: int, amount_1: int) -> int:
        """
        Computes the liquidity received for an amount of token 1 across a price range.
        Calculates amount_1 / (sqrt(upper) - sqrt(lower))

        :param sqrt_price_a: either bound of the price range
        :param sqrt_price_b: the other bound of the price range
        :param amount_1: amount of token 1 being deposited
        :return: liquidity, rounded down
        """
        if sqrt_price_a > sqrt_price_b:
            sqrt_price_a, sqrt_price_b = sqrt_price_b, sqrt_price_a
        return _to_uint_128(cls.full_math.mul_div(amount_1, SQRT_Q96, sqrt_price_b - sqrt_price_a))

    @classmethod
    def get_liquidity_for_amounts(
        cls,
        sqrt_price: int,
        sqrt_price_a: int,
        sqrt_price_b: int,
        amount_0: int,
        amount_1: int,
    ) -> int:
        """
        Computes the maximum liquidity that amount_0 and amount_1 can provide across a price range at the
        current pool price.

        :param sqrt_price: current pool sqrt price
        :param sqrt_price_a: either bound of the price range
        :param sqrt_price_b: the other bound of the price range
        :param amount_0: available amount of token 0
        :param amount_1: available amount of token 1
        :return: liquidity, rounded down
        """
        if sqrt_price_a > sqrt_price_b:
            sqrt_price_a, sqrt_price_b = sqrt_price_b, sqrt_price_a

        if sqrt_price <= sqrt_price_a:
            return cls.get_liquidity_for_amount_0(sqrt_price_a, sqrt_price_b, amount_0)
        if sqrt_price < sqrt_price_b:
            return min(
                cls.get_liquidity_for_amount_0(sqrt_price, sqrt_price_b, amount_0),
                cls.get_liquidity_for_amount_1(sqrt_price_a, sqrt_price, amount_1),
            )
        return cls.get_liquidity_for_amount_1(sqrt_price_a, sqrt_price_b, amount_1)

    @classmethod
    def get_amounts_for_liquidity(
        cls,
        sqrt_price: int,
        sqrt_price_a: int,
        sqrt_price_b: int,
        liquidity: int,
    ) -> tuple[int, int]:
        """
        Computes the token amounts represented by liquidity across a price range at the current pool price.

        * price at or below the range: only token 0
        * price inside the range: token 0 above the price, token 1 below it
        * price at or above the range: only token 1

        :param sqrt_price: current pool sqrt price
        :param sqrt_price_a: either bound of the price range
        :param sqrt_price_b: the other bound of the price range
        :param liquidity: liquidity of the range
        :return: (amount_0, amount_1), both rounded down
        """
        if sqrt_price_a > sqrt_price_b:
            sqrt_price_a, sqrt_price_b = sqrt_price_b, sqrt_price_a

        if sqrt_price <= sqrt_price_a:
            return _amount_0(sqrt_price_a, sqrt_price_b, liquidity), 0
        if sqrt_price < sqrt_price_b:
            return _amount_0(sqrt_price, sqrt_price_b, liquidity), _amount_1(sqrt_price_a, sqrt_price, liquidity)
        return 0, _amount_1(sqrt_price_a, sqrt_price_b, liquidity)


def _amount_0(sqrt_price_a: int, sqrt_price_b: int, liquidity: int) -> int:
    return FullMathModule.mul_div(liquidity << 96, sqrt_price_b - sqrt_price_a, sqrt_price_b) // sqrt_price_a


def _amount_1(sqrt_price_a: int, sqrt_price_b: int, liquidity: int) -> int:
    return FullMathModule.mul_div(liquidity, sqrt_price_b - sqrt_price_a, SQRT_Q96)


def _to_uint_128(value: int) -> int:
    if value > UINT_128_MAX:
        raise LiquidityMathRevert(f"Liquidity overflows uint128: {value}", RevertReason.LIQUIDITY_OVERFLOW)
    return value
