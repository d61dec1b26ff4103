"""Console-friendly formatting utilities."""

from __future__ import annotations

from typing import Iterable, List

from .findings import AuditResult, Finding, Outcome, Severity

SEVERITY_TAGS = {
    Severity.OK: "[ OK ]",
    Severity.WARN: "[WARN]",
    Severity.FAIL: "[FAIL]",
}


def format_header(version: str) -> str:
    lines = [
        f"This is sapconf_saptune_check v{version}.",
        "",
        "It verifies if sapconf or saptune are set up correctly.",
        "Please keep in mind:",
        " - Only *one* of both can be used at the same time!",
        " - This check does not verify if the tuning itself works.",
    ]
    return "\n".join(lines)


def format_finding(finding: Finding) -> str:
    line = f"{SEVERITY_TAGS[finding.severity]} {finding.message}"
    if finding.remediation:
        line = f"{line}  -> {finding.remediation}"
    return line


def format_findings(findings: Iterable[Finding]) -> str:
    return "\n".join(format_finding(finding) for finding in findings)


def format_summary(result: AuditResult) -> str:
    return f"{result.fail_count} failure(s), {result.warn_count} warning(s)"


def format_verdict(result: AuditResult) -> str:
    subsystem = result.subsystem
    if result.outcome is Outcome.HARD_STOP:
        return result.stop_reason or f"{subsystem} cannot be used on this system."
    if result.outcome is Outcome.FAILED:
        return f"{result.fail_count} error(s) have been found. {subsystem} will not work properly!"
    if result.outcome is Outcome.WARNED:
        return f"{result.warn_count} warning(s) have been found. {subsystem} should work properly, but better investigate!"
    return f"No problems have been found. {subsystem} should work properly."


def format_result(result: AuditResult) -> str:
    lines: List[str] = []
    if result.findings:
        lines.append(format_findings(result.findings))
        lines.append("")
    if result.outcome is not Outcome.HARD_STOP:
        lines.append(format_summary(result))
    lines.append(format_verdict(result))
    return "\n".join(lines)
