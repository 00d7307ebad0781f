import logging

import pytest


@pytest.fixture(autouse=True)
def _quiet_deploymap_logger():
    # A pre-attached handler stops StepConfig from binding a StreamHandler
    # to a stream that CliRunner closes after each invoke.
    logger = logging.getLogger("deploymap")
    handler = logging.NullHandler()
    logger.addHandler(handler)
    yield
    logger.removeHandler(handler)
