"""Pytest fixtures for chorepack."""

from __future__ import annotations

import pytest

from ..app import ChorePackApp
from ..config import ChorePackConfig
from .clock import ManualScheduler


@pytest.fixture()
def manual_scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def memory_app(manual_scheduler: ManualScheduler) -> ChorePackApp:
    return ChorePackApp(ChorePackConfig(), scheduler=manual_scheduler)
