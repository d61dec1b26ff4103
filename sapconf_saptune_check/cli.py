"""Entry point for the sapconf-saptune-check command line tool."""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List, NoReturn, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .auditors import audit
from .findings import AuditResult, Outcome, Severity
from .formatting import format_header, format_result, format_summary, format_verdict
from .logger import set_verbose
from .policy import SUBSYSTEMS
from .system_state import FactProvider, SystemFactProvider

USAGE_EXIT_CODE = 3

SEVERITY_STYLES = {
    Severity.OK: "bold green",
    Severity.WARN: "bold yellow",
    Severity.FAIL: "bold red",
}

OUTCOME_STYLES = {
    Outcome.CLEAN: "bold green",
    Outcome.WARNED: "bold yellow",
    Outcome.FAILED: "bold red",
    Outcome.HARD_STOP: "bold red",
}


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(USAGE_EXIT_CODE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="sapconf_saptune_check",
        description="Verify that sapconf or saptune is set up correctly. Only one of both may be used at a time.",
    )
    parser.add_argument("subsystem", choices=SUBSYSTEMS, help="the tuning subsystem to check")
    output = parser.add_mutually_exclusive_group()
    output.add_argument("--json", action="store_true", help="print the audit result as JSON")
    output.add_argument("--ui", action="store_true", help="render the result with Rich tables and colors")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every fact read to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None, facts: Optional[FactProvider] = None) -> int:
    args = build_parser().parse_args(argv)
    set_verbose(args.verbose)

    result = audit(args.subsystem, facts or SystemFactProvider())

    if args.json:
        print(_to_json(result))
    elif args.ui:
        _render_rich(result)
    else:
        print(format_header(__version__))
        print()
        print(format_result(result))
    return result.exit_code


def _to_json(result: AuditResult) -> str:
    payload: Dict[str, Any] = {
        "subsystem": result.subsystem,
        "outcome": result.outcome.value,
        "exit_code": result.exit_code,
        "warnings": result.warn_count,
        "failures": result.fail_count,
        "stop_reason": result.stop_reason,
        "findings": [
            {
                "severity": finding.severity.value,
                "message": finding.message,
                "remediation": finding.remediation,
            }
            for finding in result.findings
        ],
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)


def _render_rich(result: AuditResult) -> None:
    console = Console()

    console.print(Panel(f"sapconf_saptune_check {__version__} - {result.subsystem}", style="bold cyan"))

    if result.findings:
        table = Table(box=box.SIMPLE_HEAD)
        table.add_column("Status", justify="center")
        table.add_column("Check")
        table.add_column("Remediation")
        for finding in result.findings:
            table.add_row(
                f"[{SEVERITY_STYLES[finding.severity]}]{finding.severity.value}[/]",
                finding.message,
                finding.remediation or "",
            )
        console.print(table)

    verdict = format_verdict(result)
    if result.outcome is not Outcome.HARD_STOP:
        verdict = f"{format_summary(result)}\n{verdict}"
    console.print(Panel(verdict, style=OUTCOME_STYLES[result.outcome]))


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
