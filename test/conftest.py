import logging
import os
from typing import Generator
import pytest


def _is_test_variable(key: str) -> bool:
    return key.startswith("HLERR_") or key.startswith("TEST_")


@pytest.fixture(autouse=True)
def reset_logger_state() -> Generator:
    """Automatically reset logger state after each test.

    cli.setup_logging() disables logging globally for log level NONE, which
    would affect subsequent tests.
    """
    import hlerr.hlerr_main as main_module

    yield

    logging.disable(logging.NOTSET)
    main_module.lgr.disabled = False
    main_module.lgr.setLevel(logging.NOTSET)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator:
    """Provide a clean environment for testing .env file loading.

    Clears all HLERR_* and TEST_* environment variables to avoid test pollution.
    Yields the monkeypatch instance for setting new env vars in tests.  Variables
    loaded from .env files bypass monkeypatch, so they are dropped afterwards.
    """
    for key in list(os.environ.keys()):
        if _is_test_variable(key):
            monkeypatch.delenv(key, raising=False)
    yield monkeypatch
    for key in list(os.environ.keys()):
        if _is_test_variable(key):
            del os.environ[key]
