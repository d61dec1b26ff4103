"""Runtime settings, overridable through environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass
class Settings:
    os_release_path: str = os.getenv("SAPCHECK_OS_RELEASE", "/etc/os-release")
    tuned_profile_path: str = os.getenv("SAPCHECK_TUNED_PROFILE_FILE", "/etc/tuned/active_profile")
    saptune_sysconfig_path: str = os.getenv("SAPCHECK_SAPTUNE_SYSCONFIG", "/etc/sysconfig/saptune")

    # seconds per rpm/systemctl call
    command_timeout: int = int(os.getenv("SAPCHECK_COMMAND_TIMEOUT", "10"))


settings = Settings()
