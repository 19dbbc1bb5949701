import pytest

from lq.context import create_context
from lq.logger import RecordingLogger


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def make_ctx(logger):
    """Фабрика контекстов: make_ctx(conditions="strict", ...) с записывающим логгером."""
    def _make(**settings):
        return create_context(logger=logger, settings=settings or None)
    return _make


@pytest.fixture
def ctx(make_ctx):
    return make_ctx()
