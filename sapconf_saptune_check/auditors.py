"""Check whether sapconf or saptune is set up correctly on a SLES host."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Type

from .config import settings
from .findings import AuditResult, FindingCollector, build_result
from .policy import SAPCONF, SAPTUNE, VersionPolicy
from .system_state import FactError, FactProvider, OSRelease, PackageFact, ServiceFact

logger = logging.getLogger(__name__)

SUPPORTED_OS_IDS = ("sles", "sles_sap")

SAPCONF_SERVICE = "sapconf.service"
TUNED_SERVICE = "tuned.service"

SAPCONF_PROFILES = ("sapconf", "sap-hana", "sap-netweaver", "sap-ase", "sap-bobj")
SAPTUNE_PROFILE = "saptune"
SAPTUNE_VARIABLES = ("TUNE_FOR_SOLUTIONS", "TUNE_FOR_NOTES")


class HardStop(Exception):
    """The host cannot run the audited subsystem at all."""


class Auditor:
    subsystem = ""

    def __init__(self, facts: FactProvider, policy: Optional[VersionPolicy] = None) -> None:
        self.facts = facts
        self.policy = policy or VersionPolicy()
        self.collector = FindingCollector()

    def run(self) -> AuditResult:
        try:
            os_release = self._check_os_family()
            package = self._check_package_installed()
            self._check_version_policy(os_release, package)
        except HardStop as stop:
            logger.info("Audit of %s stopped: %s", self.subsystem, stop)
            return build_result(self.subsystem, self.collector, stop_reason=str(stop))
        self._run_checks()
        return build_result(self.subsystem, self.collector)

    def _run_checks(self) -> None:
        raise NotImplementedError

    def _check_os_family(self) -> OSRelease:
        try:
            os_release = self.facts.os_release()
        except FactError as exc:
            raise HardStop(f"Could not determine the operating system: {exc}") from exc
        if os_release.id not in SUPPORTED_OS_IDS:
            name = os_release.pretty_name or os_release.id or "unknown"
            raise HardStop(f"Only SLES and SLES for SAP Applications are supported, this host runs {name}.")
        return os_release

    def _check_package_installed(self) -> PackageFact:
        try:
            package = self.facts.package(self.subsystem)
        except FactError as exc:
            raise HardStop(f"Could not determine whether {self.subsystem} is installed: {exc}") from exc
        if not package.installed:
            raise HardStop(f"{self.subsystem} is not installed.")
        return package

    def _check_version_policy(self, os_release: OSRelease, package: PackageFact) -> None:
        if not self.policy.is_subsystem_supported(self.subsystem, os_release.version_id):
            raise HardStop(f"{self.subsystem} is not supported on SLES {os_release.version_id or '(unknown version)'}.")
        self.collector.ok(f"{self.subsystem} package has version {package.version}.")

    def _service(self, name: str) -> Optional[ServiceFact]:
        """Read a service state, or record a failure and return None."""
        try:
            return self.facts.service(name)
        except FactError as exc:
            self.collector.fail(f"Could not determine the state of {name}: {exc}")
            return None

    def _active_profile(self) -> Optional[str]:
        try:
            return self.facts.tuning_profile().active_name
        except FactError as exc:
            self.collector.fail(f"Could not determine the active tuned profile: {exc}")
            return None


class SapconfAuditor(Auditor):
    subsystem = SAPCONF

    def _check_version_policy(self, os_release: OSRelease, package: PackageFact) -> None:
        version_id = os_release.version_id
        if self.policy.is_subsystem_supported(SAPCONF, version_id) and not self.policy.is_package_version_reworked(
            version_id, package.version
        ):
            raise HardStop(
                f"sapconf {package.version} on SLES {version_id} is not the reworked version. "
                "Please update to sapconf 4.1.12 or later."
            )
        super()._check_version_policy(os_release, package)

    def _run_checks(self) -> None:
        self._check_profile()
        sapconf = self._service(SAPCONF_SERVICE)
        sapconf_active = self._check_sapconf_active(sapconf)
        self._check_sapconf_enabled(sapconf)
        tuned = self._service(TUNED_SERVICE)
        self._check_tuned_active(tuned, sapconf_active)
        self._check_tuned_enabled(tuned)

    def _check_profile(self) -> None:
        profile = self._active_profile()
        if profile is None:
            return
        if profile in SAPCONF_PROFILES:
            self.collector.ok(f"tuned profile '{profile}' is currently active.")
        else:
            self.collector.fail(
                f"No sapconf tuned profile is active (current profile: {profile or '(none)'}).",
                f"Choose one with 'tuned-adm profile <{'|'.join(SAPCONF_PROFILES)}>'.",
            )

    def _check_sapconf_active(self, service: Optional[ServiceFact]) -> bool:
        if service is None:
            return False
        if service.active:
            self.collector.ok(f"{SAPCONF_SERVICE} is active.")
            return True
        self.collector.fail(f"{SAPCONF_SERVICE} is inactive.", f"Run 'systemctl start {SAPCONF_SERVICE}'.")
        return False

    def _check_sapconf_enabled(self, service: Optional[ServiceFact]) -> None:
        if service is None:
            return
        if service.enabled:
            self.collector.ok(f"{SAPCONF_SERVICE} is enabled.")
        else:
            self.collector.fail(f"{SAPCONF_SERVICE} is disabled.", f"Run 'systemctl enable {SAPCONF_SERVICE}'.")

    def _check_tuned_active(self, service: Optional[ServiceFact], sapconf_active: bool) -> None:
        if service is None:
            return
        if service.active:
            self.collector.ok(f"{TUNED_SERVICE} is active.")
        elif not sapconf_active:
            self.collector.warn(
                f"{TUNED_SERVICE} is inactive.",
                f"It gets started by {SAPCONF_SERVICE} once that is running.",
            )
        else:
            self.collector.fail(
                f"{TUNED_SERVICE} is inactive although {SAPCONF_SERVICE} is active.",
                f"Run 'systemctl restart {SAPCONF_SERVICE}' and check its journal.",
            )

    def _check_tuned_enabled(self, service: Optional[ServiceFact]) -> None:
        if service is None:
            return
        if service.enabled:
            self.collector.warn(
                f"{TUNED_SERVICE} is enabled.",
                f"{SAPCONF_SERVICE} starts tuned itself, run 'systemctl disable {TUNED_SERVICE}'.",
            )
        else:
            self.collector.ok(f"{TUNED_SERVICE} is disabled.")


class SaptuneAuditor(Auditor):
    subsystem = SAPTUNE

    def __init__(
        self,
        facts: FactProvider,
        policy: Optional[VersionPolicy] = None,
        sysconfig_path: Optional[str] = None,
    ) -> None:
        super().__init__(facts, policy)
        self.sysconfig_path = sysconfig_path or settings.saptune_sysconfig_path

    def _run_checks(self) -> None:
        sapconf = self._service(SAPCONF_SERVICE)
        if sapconf is not None:
            self._check_sapconf_stopped(sapconf)
        tuned = self._service(TUNED_SERVICE)
        if tuned is not None:
            self._check_tuned_running(tuned)
        self._check_profile()
        self._check_configuration()

    def _check_sapconf_stopped(self, service: ServiceFact) -> None:
        # sapconf and saptune must never tune the system at the same time
        if service.active:
            self.collector.fail(
                f"{SAPCONF_SERVICE} is active.",
                f"Run 'systemctl stop {SAPCONF_SERVICE}', sapconf and saptune must not run together.",
            )
        else:
            self.collector.ok(f"{SAPCONF_SERVICE} is inactive.")
        if service.enabled:
            self.collector.fail(f"{SAPCONF_SERVICE} is enabled.", f"Run 'systemctl disable {SAPCONF_SERVICE}'.")
        else:
            self.collector.ok(f"{SAPCONF_SERVICE} is disabled.")

    def _check_tuned_running(self, service: ServiceFact) -> None:
        if service.active:
            self.collector.ok(f"{TUNED_SERVICE} is active.")
        else:
            self.collector.fail(f"{TUNED_SERVICE} is inactive.", f"Run 'systemctl start {TUNED_SERVICE}'.")
        if service.enabled:
            self.collector.ok(f"{TUNED_SERVICE} is enabled.")
        else:
            self.collector.fail(f"{TUNED_SERVICE} is disabled.", f"Run 'systemctl enable {TUNED_SERVICE}'.")

    def _check_profile(self) -> None:
        profile = self._active_profile()
        if profile is None:
            return
        if profile == SAPTUNE_PROFILE:
            self.collector.ok(f"tuned profile '{profile}' is currently active.")
        else:
            self.collector.fail(
                f"tuned profile '{profile or '(none)'}' is active instead of '{SAPTUNE_PROFILE}'.",
                "Run 'saptune daemon start' to activate the saptune profile.",
            )

    def _check_configuration(self) -> None:
        try:
            entries = self.facts.config_entries(self.sysconfig_path, SAPTUNE_VARIABLES)
        except FactError as exc:
            self.collector.fail(f"Could not read the saptune configuration: {exc}")
            return
        solutions = entries.get("TUNE_FOR_SOLUTIONS", "").strip()
        notes = entries.get("TUNE_FOR_NOTES", "").strip()
        if not solutions and not notes:
            self.collector.fail(
                "No saptune solution or note is configured.",
                "Apply one with 'saptune solution apply <solution>' or 'saptune note apply <note>'.",
            )
            return
        self.collector.ok(f"saptune is configured with solution(s): {solutions or '-'} and note(s): {notes or '-'}.")


AUDITORS: Dict[str, Type[Auditor]] = {
    SAPCONF: SapconfAuditor,
    SAPTUNE: SaptuneAuditor,
}


def audit(subsystem: str, facts: FactProvider, policy: Optional[VersionPolicy] = None) -> AuditResult:
    """Run the audit for ``subsystem`` and return its result."""
    try:
        auditor_cls = AUDITORS[subsystem]
    except KeyError:
        raise ValueError(f"unknown subsystem: {subsystem!r}") from None
    return auditor_cls(facts, policy).run()
