from .erc_20 import NULL_TOKEN, ERC20Token

__all__ = ["ERC20Token", "NULL_TOKEN"]
