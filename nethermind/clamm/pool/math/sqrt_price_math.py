from nethermind.clamm.exceptions import RevertReason, SqrtPriceMathRevert

from .full_math import FullMathModule
from .shared import (
    INT_256_MAX,
    SQRT_Q96,
    SQRT_RESOLUTION,
    UINT_160_MAX,
    UINT_256_MAX,
)


class SqrtPriceMathModule:
    """
    Math module for calculating sqrt prices & token amounts between prices.  Amounts owed to the pool are rounded
    up, and amounts paid out of the pool are rounded down, so rounding never favors the caller.
    """

    full_math = FullMathModule

    @classmethod
    def get_next_sqrt_price_from_amount_0_rounding_up(
        cls,
        sqrt_price: int,
        liquidity: int,
        amount: int,
        add: bool,
    ) -> int:
        """
        Returns the next sqrt price given a delta of token 0.  Always rounds up, so the price moves
        far enough to cover the input amount, and not so far that the output amount is overpaid.

        :param sqrt_price: starting sqrt price
        :param liquidity: usable liquidity
        :param amount: amount of token 0 to add or remove from the virtual reserves
        :param add: whether to add or remove the amount of token 0
        :return:
        """
        if amount == 0:
            return sqrt_price

        numerator_1 = liquidity << SQRT_RESOLUTION
        product = amount * sqrt_price

        if add:
            if product <= UINT_256_MAX:
                denominator = numerator_1 + product
                if denominator <= UINT_256_MAX:
                    return cls.full_math.mul_div_rounding_up(numerator_1, sqrt_price, denominator)

            return cls.full_math.div_rounding_up(numerator_1, (numerator_1 // sqrt_price) + amount)

        if product > UINT_256_MAX or numerator_1 <= product:
            raise SqrtPriceMathRevert(
                "Output amount of token 0 exceeds the virtual reserves", RevertReason.INSUFFICIENT_LIQUIDITY
            )

        next_price = cls.full_math.mul_div_rounding_up(numerator_1, sqrt_price, numerator_1 - product)
        if next_price > UINT_160_MAX:
            raise SqrtPriceMathRevert("Next sqrt price overflows uint160")
        return next_price

    @classmethod
    def get_next_sqrt_price_from_amount_1_rounding_down(
        cls,
        sqrt_price: int,
        liquidity: int,
        amount: int,
        add: bool,
    ) -> int:
        """
        Returns the next sqrt price given a delta of token 1.  Always rounds down.

        :param sqrt_price: starting sqrt price
        :param liquidity: usable liquidity
        :param amount: amount of token 1 to add or remove from the virtual reserves
        :param add: whether to add or remove the amount of token 1
        :return:
        """
        if add:
            quotient = cls.full_math.mul_div(amount, SQRT_Q96, liquidity)
            if sqrt_price + quotient > UINT_160_MAX:
                raise SqrtPriceMathRevert("Next sqrt price overflows uint160")
            return sqrt_price + quotient

        quotient = cls.full_math.mul_div_rounding_up(amount, SQRT_Q96, liquidity)
        if sqrt_price <= quotient:
            raise SqrtPriceMathRevert(
                "Output amount of token 1 exceeds the virtual reserves", RevertReason.INSUFFICIENT_LIQUIDITY
            )
        return sqrt_price - quotient

    @classmethod
    def get_next_sqrt_price_from_input(
        cls,
        sqrt_price: int,
        liquidity: int,
        amount_in: int,
        zero_for_one: bool,
    ) -> int:
        """
        Returns the next sqrt price given an input amount of token 0 or token 1

        :param sqrt_price:
        :param liquidity:
        :param amount_in:
        :param zero_for_one:
        :return:
        """
        if sqrt_price <= 0 or liquidity <= 0:
            raise SqrtPriceMathRevert("sqrt_price and liquidity must be greater than 0")

        if zero_for_one:
            return cls.get_next_sqrt_price_from_amount_0_rounding_up(sqrt_price, liquidity, amount_in, True)
        return cls.get_next_sqrt_price_from_amount_1_rounding_down(sqrt_price, liquidity, amount_in, True)

    @classmethod
    def get_next_sqrt_price_from_output(
        cls,
        sqrt_price: int,
        liquidity: int,
        amount_out: int,
        zero_for_one: bool,
    ) -> int:
        """
        Returns the next sqrt price given an output amount of token 0 or token 1

        :param sqrt_price:
        :param liquidity:
        :param amount_out:
        :param zero_for_one:
        :return:
        """
        if sqrt_price <= 0 or liquidity <= 0:
            raise SqrtPriceMathRevert("sqrt_price and liquidity must be greater than 0")

        if zero_for_one:
            return cls.get_next_sqrt_price_from_amount_1_rounding_down(sqrt_price, liquidity, amount_out, False)
        return cls.get_next_sqrt_price_from_amount_0_rounding_up(sqrt_price, liquidity, amount_out, False)

    @classmethod
    def get_amount_0_delta_unsigned(
        cls,
        sqrt_price_a: int,
        sqrt_price_b: int,
        liquidity: int,
        round_up: bool,
    ) -> int:
        """
        Returns liquidity / sqrt(lower) - liquidity / sqrt(upper), the amount of token 0 between two prices

        :param sqrt_price_a: either bound of the price range
        :param sqrt_price_b: the other bound of the price range
        :param liquidity: unsigned liquidity
        :param round_up: whether to round the amount up or down
        :return:
        """
        if sqrt_price_a > sqrt_price_b:
            sqrt_price_a, sqrt_price_b = sqrt_price_b, sqrt_price_a
        if sqrt_price_a <= 0:
            raise SqrtPriceMathRevert("sqrt_price_a must be greater than 0")

        numerator_1 = liquidity << SQRT_RESOLUTION
        numerator_2 = sqrt_price_b - sqrt_price_a

        if round_up:
            return cls.full_math.div_rounding_up(
                cls.full_math.mul_div_rounding_up(numerator_1, numerator_2, sqrt_price_b),
                sqrt_price_a,
            )
        return cls.full_math.mul_div(numerator_1, numerator_2, sqrt_price_b) // sqrt_price_a

    @classmethod
    def get_amount_1_delta_unsigned(
        cls,
        sqrt_price_a: int,
        sqrt_price_b: int,
        liquidity: int,
        round_up: bool,
    ) -> int:
        """
        Returns liquidity * (sqrt(upper) - sqrt(lower)), the amount of token 1 between two prices

        :param sqrt_price_a: either bound of the price range
        :param sqrt_price_b: the other bound of the price range
        :param liquidity: unsigned liquidity
        :param round_up: whether to round the amount up or down
        :return:
        """
        if sqrt_price_a > sqrt_price_b:
            sqrt_price_a, sqrt_price_b = sqrt_price_b, sqrt_price_a

        if round_up:
            return cls.full_math.mul_div_rounding_up(liquidity, sqrt_price_b - sqrt_price_a, SQRT_Q96)
        return cls.full_math.mul_div(liquidity, sqrt_price_b - sqrt_price_a, SQRT_Q96)

    @classmethod
    def get_amount_0_delta(
        cls,
        sqrt_price_a: int,
        sqrt_price_b: int,
        liquidity: int,
    ) -> int:
        """
        Returns the signed amount of token 0 for a signed liquidity delta.  Positive liquidity is rounded up
        (tokens owed to the pool), negative liquidity is rounded down and returned as a negative amount.

        :param sqrt_price_a:
        :param sqrt_price_b:
        :param liquidity: signed liquidity delta
        :return:
        """
        if liquidity < 0:
            return -_check_int_256(cls.get_amount_0_delta_unsigned(sqrt_price_a, sqrt_price_b, -liquidity, False))
        return _check_int_256(cls.get_amount_0_delta_unsigned(sqrt_price_a, sqrt_price_b, liquidity, True))

    @classmethod
    def get_amount_1_delta(
        cls,
        sqrt_price_a: int,
        sqrt_price_b: int,
        liquidity: int,
    ) -> int:
        """
        Returns the signed amount of token 1 for a signed liquidity delta.

        :param sqrt_price_a:
        :param sqrt_price_b:
        :param liquidity: signed liquidity delta
        :return:
        """
        if liquidity < 0:
            return -_check_int_256(cls.get_amount_1_delta_unsigned(sqrt_price_a, sqrt_price_b, -liquidity, False))
        return _check_int_256(cls.get_amount_1_delta_unsigned(sqrt_price_a, sqrt_price_b, liquidity, True))


def _check_int_256(amount: int) -> int:
    if amount > INT_256_MAX:
        raise SqrtPriceMathRevert(f"{amount} overflows int256", RevertReason.AMOUNT_OVERFLOW)
    return amount
