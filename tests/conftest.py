import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_app_logger():
    """Undo setup_logging so caplog sees records in every test."""
    yield
    for name in ("aero_news", "aero_news.llm"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers = []
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
