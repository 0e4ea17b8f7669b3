from typing import Any

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address
from pydantic import BaseModel, field_validator


class ERC20Token(BaseModel):
    """
    Metadata of a token traded through a pool.  Pools only use the symbol and decimals, to format prices
    and amounts for display.
    """

    name: str
    """
        UTF-8 Name of the token
    """

    symbol: str
    """
        Token Symbol
    """

    decimals: int
    """
        Number of decimals used by raw token amounts
    """

    address: ChecksumAddress
    """
        Address of the token, normalized to checksum format
    """

    @field_validator("address", mode="before")
    @classmethod
    def checksum_address(cls, value: str) -> ChecksumAddress:
        """Converts hex addresses to checksum format"""
        return to_checksum_address(value)

    @classmethod
    def from_dict(cls, token_params: dict[str, Any]) -> "ERC20Token":
        """
        Builds a token from the dictionary written by :meth:`to_dict`, as stored in saved pool files.

        :param token_params: name, symbol, decimals and address of the token
        :return: :class:`~nethermind.clamm.tokens.ERC20Token`
        """
        return cls.model_validate(token_params)

    def to_dict(self) -> dict[str, Any]:
        """
        JSON-compatible dictionary of the token, read back by :meth:`from_dict`
        """
        return self.model_dump()

    def convert_decimals(self, raw_token_amount: int) -> float:
        """
        Scales a raw integer amount down by the token decimals

        :param raw_token_amount: integer amount as tracked by the pool
        """
        return raw_token_amount / 10**self.decimals

    def human_readable(self, raw_token_amount: int) -> str:
        """
        Formats a raw amount for display, ie 2.5 USDC
        """

        return f"{self.convert_decimals(raw_token_amount)} {self.symbol}"


NULL_TOKEN = ERC20Token(
    name="Empty Test Token",
    symbol="NULL",
    decimals=18,
    address="0x0000000000000000000000000000000000000000",
)
