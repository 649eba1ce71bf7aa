"""
Shared fixtures (like `parser_settings`) for all tests.

Includes pytest hooks for better progress visibility and timing information.
"""

import logging
import time

import pytest

from variant_notation.scripts.utils import get_parser_settings

# ============================================================================
# Logging Configuration
# ============================================================================
logger = logging.getLogger(__name__)


# ============================================================================
# Session-level Fixtures
# ============================================================================
@pytest.fixture(scope="session")
def parser_settings():
    """
    Session-scoped fixture for the packaged parser settings.
    """
    return get_parser_settings()


# ============================================================================
# Pytest Hooks for Progress Visibility
# ============================================================================


def pytest_configure(config):
    """
    Register the markers used by the test modules.
    """
    config.addinivalue_line("markers", "unit: fast tests without external resources")


def pytest_collection_modifyitems(config, items):
    """
    Hook called after test collection. Shows how many tests were collected.
    """
    logger.info(f"Collected {len(items)} test(s)")

    unit_count = sum(1 for item in items if "unit" in [m.name for m in item.iter_markers()])
    if unit_count > 0:
        logger.info(f"  - Unit tests: {unit_count}")


def pytest_runtest_setup(item):
    """
    Hook called before each test setup phase. Logs test start with timing.
    """
    item.test_start_time = time.time()

    markers = [m.name for m in item.iter_markers()]
    marker_str = f" [{', '.join(markers)}]" if markers else ""

    logger.info(f"{'=' * 80}")
    logger.info(f"STARTING: {item.nodeid}{marker_str}")
    logger.info(f"{'=' * 80}")


def pytest_runtest_teardown(item, nextitem):
    """
    Hook called during test teardown phase. Logs test completion and duration.
    """
    if hasattr(item, "test_start_time"):
        duration = time.time() - item.test_start_time
        logger.info(f"DURATION: {duration:.2f}s for {item.nodeid}")


@pytest.hookimpl(hookwrapper=True, tryfirst=True)
def pytest_runtest_makereport(item, call):
    """
    Hook wrapper to log test outcomes (PASSED/FAILED/SKIPPED) with timing info.
    """
    outcome = yield
    rep = outcome.get_result()

    if rep.when == "call":
        duration_str = f" ({rep.duration:.2f}s)" if hasattr(rep, "duration") else ""

        if rep.outcome == "passed":
            logger.info(f"PASSED{duration_str}: {item.nodeid}")
        elif rep.outcome == "failed":
            logger.error(f"FAILED{duration_str}: {item.nodeid}")
            if hasattr(rep, "longrepr"):
                logger.error(f"  Error: {rep.longrepr}")
        elif rep.outcome == "skipped":
            logger.warning(f"SKIPPED{duration_str}: {item.nodeid}")


def pytest_sessionstart(session):
    """
    Hook called at the very start of the test session.
    """
    logger.info("=" * 80)
    logger.info("PYTEST SESSION STARTED")
    logger.info("=" * 80)


def pytest_sessionfinish(session, exitstatus):
    """
    Hook called at the end of the test session. Shows final summary.
    """
    logger.info("=" * 80)
    logger.info("PYTEST SESSION FINISHED")
    logger.info(f"Exit status: {exitstatus}")
    logger.info("=" * 80)
