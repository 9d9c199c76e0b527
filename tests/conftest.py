import logging

import pytest

from wireframe_scene.logging_config import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_package_logger():
    """CLI tests call setup_logging(); undo it so caplog sees every record."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def write_scene(tmp_path):
    def write(text, name="scene.ini"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return write
