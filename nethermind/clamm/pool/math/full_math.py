from nethermind.clamm.exceptions import FullMathRevert, RevertReason

from .shared import UINT_256_MAX


class FullMathModule:
    """Math Module for computing (a * b / denominator) with uint256 behavior"""

    @classmethod
    def mul_div(cls, numerator_1: int, numerator_2: int, denominator: int) -> int:
        """
        Computes the result of (numerator_1 * numerator_2) / denominator.
        Returns value as uint256, rounded down.  The intermediate product is never truncated, so the result is
        exact as long as it fits in 256 bits.

        :raises FullMathRevert: if denominator is zero, or the result overflows a uint256
        """
        if denominator == 0:
            raise FullMathRevert("mul_div denominator cannot be zero", RevertReason.DIVISION_BY_ZERO)

        result = (numerator_1 * numerator_2) // denominator
        if result > UINT_256_MAX:
            raise FullMathRevert(f"mul_div result overflows uint256: {result}", RevertReason.MUL_DIV_OVERFLOW)
        return result

    @classmethod
    def mul_div_rounding_up(cls, numerator_1: int, numerator_2: int, denominator: int) -> int:
        """
        Computes the result of (numerator_1 * numerator_2) / denominator.
        Returns value as uint256, rounded up

        :raises FullMathRevert: if denominator is zero, or the rounded result overflows a uint256
        """
        result = cls.mul_div(numerator_1, numerator_2, denominator)

        if (numerator_1 * numerator_2) % denominator > 0:
            if result >= UINT_256_MAX:
                raise FullMathRevert("mul_div result overflows uint256 after rounding up")
            result += 1

        return result

    @classmethod
    def div_rounding_up(cls, numerator: int, denominator: int) -> int:
        """
        Returns ceil(numerator / denominator).  Inputs are unsigned

        :raises FullMathRevert: if denominator is zero
        """
        if denominator == 0:
            raise FullMathRevert("div_rounding_up denominator cannot be zero", RevertReason.DIVISION_BY_ZERO)
        quotient, remainder = divmod(numerator, denominator)
        return quotient + (1 if remainder > 0 else 0)
