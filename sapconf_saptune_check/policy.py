"""Which SLES releases and package versions each tuning subsystem supports."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Dict, Optional, Sequence, Tuple

SAPCONF = "sapconf"
SAPTUNE = "saptune"
SUBSYSTEMS = (SAPCONF, SAPTUNE)

# sapconf 4.1.12 is the first reworked release on SLES 12 SP1 to SP3
REWORKED_SAPCONF_RELEASE = (4, 1)
REWORKED_SAPCONF_MIN_PATCH = 12

_OS_VERSION_RE = re.compile(r"^(\d+)(?:\.(\d+))?$")
_PACKAGE_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)")

OSVersion = Tuple[int, Optional[int]]


@dataclass(frozen=True)
class SupportRule:
    major: int
    minor: Optional[int]  # None matches any service pack
    rework_gate: bool = False

    def matches(self, version: OSVersion) -> bool:
        major, minor = version
        return major == self.major and (self.minor is None or minor == self.minor)


SUPPORT_TABLE: Dict[str, Sequence[SupportRule]] = {
    SAPCONF: (
        SupportRule(12, 1, rework_gate=True),
        SupportRule(12, 2, rework_gate=True),
        SupportRule(12, 3, rework_gate=True),
        SupportRule(12, 4),
        SupportRule(12, 5),
        SupportRule(15, None),
    ),
    SAPTUNE: (
        SupportRule(12, 2),
        SupportRule(12, 3),
        SupportRule(12, 4),
        SupportRule(12, 5),
        SupportRule(15, None),
    ),
}


def parse_os_version(version_id: str) -> Optional[OSVersion]:
    """Split an os-release VERSION_ID such as ``12.3`` or ``15`` into (major, minor)."""
    match = _OS_VERSION_RE.match(version_id.strip())
    if not match:
        return None
    major, minor = match.groups()
    return int(major), int(minor) if minor is not None else None


def parse_package_version(version: str) -> Optional[Tuple[int, int, int]]:
    match = _PACKAGE_VERSION_RE.match(version.strip())
    if not match:
        return None
    major, minor, patch = (int(part) for part in match.groups())
    return major, minor, patch


class VersionPolicy:
    def __init__(self, table: Optional[Dict[str, Sequence[SupportRule]]] = None) -> None:
        self.table = table if table is not None else SUPPORT_TABLE

    def rule_for(self, subsystem: str, os_version_id: str) -> Optional[SupportRule]:
        if subsystem not in self.table:
            raise ValueError(f"unknown subsystem: {subsystem!r}")
        version = parse_os_version(os_version_id)
        if version is None:
            return None
        for rule in self.table[subsystem]:
            if rule.matches(version):
                return rule
        return None

    def is_subsystem_supported(self, subsystem: str, os_version_id: str) -> bool:
        return self.rule_for(subsystem, os_version_id) is not None

    def is_package_version_reworked(self, os_version_id: str, package_version: str) -> bool:
        """Tell whether the installed sapconf is the reworked implementation.

        Only SLES 12 SP1 to SP3 still ship the legacy sapconf, so the package
        version is checked there. Newer releases only carry the reworked one.
        """
        rule = self.rule_for(SAPCONF, os_version_id)
        if rule is None:
            return False
        if not rule.rework_gate:
            return True
        parsed = parse_package_version(package_version)
        if parsed is None:
            return False
        major, minor, patch = parsed
        return (major, minor) == REWORKED_SAPCONF_RELEASE and patch >= REWORKED_SAPCONF_MIN_PATCH
