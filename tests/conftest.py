"""
Shared pytest fixtures
"""
import logging

import pytest


@pytest.fixture(autouse=True)
def reset_root_logger():
    """The CLI installs console/file handlers on the root logger; drop them after each test"""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
