"""Unit test configuration - isolated settings and logging"""

import logging

import pytest

from kb_relevance.config import get_settings

SETTINGS_ENV_VARS = [
    "RAG_TOP_K",
    "RAG_SCORE_THRESHOLD",
    "RAG_CONTEXT_CHAR_LIMIT",
    "SEARCH_PAGE_SIZE",
    "SCORING_MAX_WORKERS",
    "SCORING_PARALLEL_THRESHOLD",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """
    Run every test against default settings.
    
    Developer .env.local values or a cached Settings from an earlier test
    must not leak into assertions.
    """
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers replaced by setup_logging()"""
    root_logger = logging.getLogger()
    saved_handlers = list(root_logger.handlers)
    saved_level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers:
        if handler not in saved_handlers:
            handler.close()
    root_logger.handlers[:] = saved_handlers
    root_logger.setLevel(saved_level)
