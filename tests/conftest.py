"""
Shared test fixtures.

The adapter builds its AccessGuard once per process. Tests that override
POS_ACCESS* settings need the cached guard dropped whenever those
settings change, and again once the override is undone.
"""

from __future__ import annotations

import pytest
from django.test.signals import setting_changed

from adapters.django_api.wiring import reset_access_guard


def _reset_on_access_setting(*, setting, **kwargs) -> None:
    if setting.startswith("POS_ACCESS"):
        reset_access_guard()


@pytest.fixture(autouse=True)
def _access_settings_reset():
    setting_changed.connect(_reset_on_access_setting)
    yield
    setting_changed.disconnect(_reset_on_access_setting)
    reset_access_guard()
