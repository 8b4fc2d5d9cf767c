"""
POS Bootstrap — App Configuration
===================================
Triggers the access self-check when Django finishes loading.

Rules:
- Runs once via ready()
- Skips during management commands that don't serve requests
- If configuration or self-check fails → startup is refused
"""

import logging
import os
import sys

from django.apps import AppConfig

logger = logging.getLogger("pos.bootstrap")

# Commands that should NOT trigger bootstrap checks
SKIP_COMMANDS = {
    "makemigrations",
    "showmigrations",
    "shell",
    "test",
    "collectstatic",
}


def _is_management_command_skip():
    """Check if current command should skip bootstrap checks."""
    if len(sys.argv) >= 2:
        return sys.argv[1] in SKIP_COMMANDS
    return False


def _is_pytest_context() -> bool:
    return (
        "PYTEST_CURRENT_TEST" in os.environ
        or "pytest" in sys.modules
    )


class BootstrapConfig(AppConfig):
    name = "core.bootstrap"
    label = "bootstrap"
    verbose_name = "POS Access Bootstrap"

    def ready(self):
        if _is_management_command_skip() or _is_pytest_context():
            logger.info(
                "Bootstrap self-check skipped for management/test context."
            )
            return

        from adapters.django_api.wiring import build_access_guard
        from core.bootstrap.errors import AccessBootstrapError
        from core.bootstrap.self_check import run_bootstrap_checks
        from core.config.access import ConfigurationError

        try:
            guard = build_access_guard()
        except ConfigurationError as exc:
            raise AccessBootstrapError(
                invariant="ACCESS_CONFIGURATION",
                detail=exc.detail,
            ) from exc
        run_bootstrap_checks(guard)
