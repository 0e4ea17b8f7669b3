import random
from typing import Literal

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address


def random_address() -> ChecksumAddress:
    """
    Generate a random 20 byte ChecksumAddress
    :return: ChecksumAddress
    """
    return to_checksum_address(random.randbytes(20).hex())


def uint_over_under_flow(value: int, precision: Literal[128, 160, 256]) -> int:
    """
    Handle uint over/underflow.  If value exceeds the max size of the uint, the value wraps around
    and continues from 0.  If value is less than 0, the value wraps around from the max.  Fee growth
    accumulators rely on this wrapping behavior, since only differences between snapshots are meaningful.

    :param value: Number to wrap
    :param precision: bits of precision
    :return: within range uint
    """
    return value % (2**precision)


def position_key(owner: ChecksumAddress | str, tick_lower: int, tick_upper: int) -> str:
    """
    Encodes a position key as a string for JSON persistence

    :param owner: checksum address of the position owner
    :param tick_lower:
    :param tick_upper:
    :return: "<owner>_<tick_lower>_<tick_upper>"
    """
    return f"{owner}_{tick_lower}_{tick_upper}"


def parse_position_key(key: str) -> tuple[ChecksumAddress, int, int]:
    """Inverse of :func:`position_key`"""
    owner, tick_lower, tick_upper = key.rsplit("_", 2)
    return ChecksumAddress(owner), int(tick_lower), int(tick_upper)
