import logging
import random
from pathlib import Path

import pytest
from eth_utils import to_checksum_address
from pytest import FixtureRequest


@pytest.fixture(name="random_address")
def fixture_random_address():
    def _random_address():
        return to_checksum_address(random.randbytes(20).hex())

    return _random_address


@pytest.fixture(scope="function")
def debug_logger(request: FixtureRequest, tmp_path: Path):
    """Writes DEBUG output of the nethermind loggers to <tmp_path>/<test name>.log for the duration of a test"""
    log_file = tmp_path / f"{request.function.__name__}.log"

    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(logging.Formatter("%(levelname)-8s | %(name)-30s | %(message)s"))

    logger = logging.getLogger("nethermind")
    previous_level = logger.level
    logger.addHandler(file_handler)
    logger.setLevel(logging.DEBUG)

    logger.debug(f"Running {request.node.nodeid}")

    yield logger

    logger.removeHandler(file_handler)
    logger.setLevel(previous_level)
    file_handler.close()
