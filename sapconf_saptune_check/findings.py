"""Findings collected during an audit and the outcome they add up to."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class Severity(str, Enum):
    OK = "OK"
    WARN = "WARN"
    FAIL = "FAIL"


class Outcome(str, Enum):
    CLEAN = "clean"
    WARNED = "warned"
    FAILED = "failed"
    HARD_STOP = "hard-stop"


EXIT_CODES = {
    Outcome.CLEAN: 0,
    Outcome.WARNED: 0,
    Outcome.FAILED: 1,
    Outcome.HARD_STOP: 2,
}


@dataclass(frozen=True)
class Finding:
    severity: Severity
    message: str
    remediation: Optional[str] = None


class FindingCollector:
    """Ordered record of findings. Nothing is ever reordered or deduplicated."""

    def __init__(self) -> None:
        self._findings: List[Finding] = []
        self._warn_count = 0
        self._fail_count = 0

    def add(self, severity: Severity, message: str, remediation: Optional[str] = None) -> Finding:
        finding = Finding(severity=severity, message=message, remediation=remediation)
        self._findings.append(finding)
        if severity is Severity.WARN:
            self._warn_count += 1
        elif severity is Severity.FAIL:
            self._fail_count += 1
        return finding

    def ok(self, message: str) -> Finding:
        return self.add(Severity.OK, message)

    def warn(self, message: str, remediation: Optional[str] = None) -> Finding:
        return self.add(Severity.WARN, message, remediation)

    def fail(self, message: str, remediation: Optional[str] = None) -> Finding:
        return self.add(Severity.FAIL, message, remediation)

    def counts(self) -> Tuple[int, int]:
        """Return ``(warn_count, fail_count)``."""
        return self._warn_count, self._fail_count

    def all(self) -> Tuple[Finding, ...]:
        return tuple(self._findings)

    def __len__(self) -> int:
        return len(self._findings)


@dataclass
class AuditResult:
    subsystem: str
    outcome: Outcome
    findings: Tuple[Finding, ...] = field(default_factory=tuple)
    warn_count: int = 0
    fail_count: int = 0
    stop_reason: Optional[str] = None

    @property
    def exit_code(self) -> int:
        return exit_code(self.outcome)


def aggregate(fail_count: int, warn_count: int, hard_stop: bool) -> Outcome:
    if hard_stop:
        return Outcome.HARD_STOP
    if fail_count > 0:
        return Outcome.FAILED
    if warn_count > 0:
        return Outcome.WARNED
    return Outcome.CLEAN


def exit_code(outcome: Outcome) -> int:
    return EXIT_CODES[outcome]


def build_result(subsystem: str, collector: FindingCollector, stop_reason: Optional[str] = None) -> AuditResult:
    """Reduce a collector into an AuditResult. A stop reason means the audit hit a hard stop."""
    warn_count, fail_count = collector.counts()
    return AuditResult(
        subsystem=subsystem,
        outcome=aggregate(fail_count, warn_count, hard_stop=stop_reason is not None),
        findings=collector.all(),
        warn_count=warn_count,
        fail_count=fail_count,
        stop_reason=stop_reason,
    )
