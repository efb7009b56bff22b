"""Pytest configuration for the chatbridge test suite."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

import pytest

from chatbridge import i18n
from chatbridge.log import logger as chatbridge_logger, shutdown_logging
from chatbridge.transcript.engine import TranscriptEngine


def _normalise_marker_name(name: str) -> str:
    return name.replace("-", "_")


_SUITE_STASH_KEY = pytest.StashKey["SuiteDefinition"]()


@dataclass(frozen=True)
class SuiteDefinition:
    """Describe how a logical test suite filters collected tests."""

    name: str
    include_any: Sequence[str] = ()
    exclude_any: Sequence[str] = ()
    include_by_default: bool = True
    description: str = ""

    def should_run(self, item: pytest.Item) -> bool:
        markers = {_normalise_marker_name(marker.name) for marker in item.iter_markers()}
        include = {_normalise_marker_name(name) for name in self.include_any}
        exclude = {_normalise_marker_name(name) for name in self.exclude_any}
        if include and markers & include:
            return True
        if not self.include_by_default:
            return False
        return not markers & exclude


SUITES: Mapping[str, SuiteDefinition] = {
    "core": SuiteDefinition(
        name="core",
        exclude_any=("integration", "quality"),
        description="Engine, codec and settings unit checks",
    ),
    "service": SuiteDefinition(
        name="service",
        exclude_any=("quality",),
        description="Core suite plus transport and controller flows",
    ),
    "quality": SuiteDefinition(
        name="quality",
        include_any=("quality",),
        include_by_default=False,
        description="Translation catalogue and packaging checks",
    ),
}


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--suite",
        action="store",
        choices=sorted(SUITES),
        help="Select the logical test suite to run",
    )


def pytest_configure(config: pytest.Config) -> None:
    suite_name = config.getoption("--suite")
    if suite_name is None:
        return
    config.stash[_SUITE_STASH_KEY] = SUITES[suite_name]


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    suite = config.stash.get(_SUITE_STASH_KEY, None)
    if suite is None:
        return

    selected: list[pytest.Item] = []
    deselected: list[pytest.Item] = []
    for item in items:
        (selected if suite.should_run(item) else deselected).append(item)

    if deselected:
        config.hook.pytest_deselected(items=deselected)
        items[:] = selected


@pytest.fixture(autouse=True)
def _untranslated():
    """Keep every test on the built-in English messages."""

    i18n.reset()
    yield
    i18n.reset()


@pytest.fixture
def isolated_logging():
    """Detach chatbridge handlers before and after a logging test."""

    shutdown_logging()
    level = chatbridge_logger.level
    yield
    shutdown_logging()
    chatbridge_logger.setLevel(level or logging.NOTSET)


@pytest.fixture
def clock() -> Callable[[], int]:
    """Deterministic millisecond clock advancing by one second per call."""

    ticks = itertools.count(start=1_700_000_000_000, step=1000)
    return lambda: next(ticks)


@pytest.fixture
def engine(clock: Callable[[], int]) -> TranscriptEngine:
    return TranscriptEngine(clock=clock)
