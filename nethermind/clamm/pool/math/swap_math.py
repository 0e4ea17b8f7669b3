from .full_math import FullMathModule
from .shared import FEE_DENOMINATOR, SwapComputation
from .sqrt_price_math import SqrtPriceMathModule


class SwapMathModule:
    """Computes the result of swapping within a single price range of constant liquidity"""

    full_math = FullMathModule
    sqrt_price_math = SqrtPriceMathModule

    @classmethod
    def compute_swap_step(
        cls,
        sqrt_price_current: int,
        sqrt_price_target: int,
        liquidity: int,
        amount_remaining: int,
        fee_pips: int,
    ) -> SwapComputation:
        """
        Computes the next step in a swap.  Returns the next sqrt price, amount in, amount out, and fee amount.

        The swap direction is inferred from the prices: if sqrt_price_current >= sqrt_price_target, token 0 is
        swapped for token 1.  A positive amount_remaining is an exact input amount (fee inclusive), a negative
        amount_remaining is an exact output amount.

        :param sqrt_price_current: current sqrt price of the pool
        :param sqrt_price_target: price that cannot be exceeded during this step
        :param liquidity: usable liquidity
        :param amount_remaining: amount left to swap in or out
        :param fee_pips: fee taken from the input amount, in hundredths of a bip
        :return: SwapComputation
        """
        # pylint: disable=too-many-branches
        zero_for_one = sqrt_price_current >= sqrt_price_target
        exact_input = amount_remaining >= 0
        spm = cls.sqrt_price_math
        amount_in, amount_out = 0, 0

        if exact_input:
            amount_remaining_less_fee = cls.full_math.mul_div(
                amount_remaining,
                FEE_DENOMINATOR - fee_pips,
                FEE_DENOMINATOR,
            )
            if zero_for_one:
                amount_in = spm.get_amount_0_delta_unsigned(sqrt_price_target, sqrt_price_current, liquidity, True)
            else:
                amount_in = spm.get_amount_1_delta_unsigned(sqrt_price_current, sqrt_price_target, liquidity, True)

            if amount_remaining_less_fee >= amount_in:
                sqrt_price_next = sqrt_price_target
            else:
                sqrt_price_next = spm.get_next_sqrt_price_from_input(
                    sqrt_price_current,
                    liquidity,
                    amount_remaining_less_fee,
                    zero_for_one,
                )
        else:
            if zero_for_one:
                amount_out = spm.get_amount_1_delta_unsigned(sqrt_price_target, sqrt_price_current, liquidity, False)
            else:
                amount_out = spm.get_amount_0_delta_unsigned(sqrt_price_current, sqrt_price_target, liquidity, False)

            if -amount_remaining >= amount_out:
                sqrt_price_next = sqrt_price_target
            else:
                sqrt_price_next = spm.get_next_sqrt_price_from_output(
                    sqrt_price_current,
                    liquidity,
                    -amount_remaining,
                    zero_for_one,
                )

        reached_target = sqrt_price_target == sqrt_price_next

        if zero_for_one:
            if not (reached_target and exact_input):
                amount_in = spm.get_amount_0_delta_unsigned(sqrt_price_next, sqrt_price_current, liquidity, True)
            if not (reached_target and not exact_input):
                amount_out = spm.get_amount_1_delta_unsigned(sqrt_price_next, sqrt_price_current, liquidity, False)
        else:
            if not (reached_target and exact_input):
                amount_in = spm.get_amount_1_delta_unsigned(sqrt_price_current, sqrt_price_next, liquidity, True)
            if not (reached_target and not exact_input):
                amount_out = spm.get_amount_0_delta_unsigned(sqrt_price_current, sqrt_price_next, liquidity, False)

        # cap the output amount to not exceed the remaining output amount
        if not exact_input and amount_out > -amount_remaining:
            amount_out = -amount_remaining

        if exact_input and sqrt_price_next != sqrt_price_target:
            # the input was not enough to reach the target, so the remainder is taken as fee
            fee_amount = amount_remaining - amount_in
        else:
            fee_amount = cls.full_math.mul_div_rounding_up(amount_in, fee_pips, FEE_DENOMINATOR - fee_pips)

        return SwapComputation(
            sqrt_price_next=sqrt_price_next,
            amount_in=amount_in,
            amount_out=amount_out,
            fee_amount=fee_amount,
        )
