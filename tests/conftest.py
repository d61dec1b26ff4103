from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pytest

from sapconf_saptune_check.system_state import FactError, OSRelease, PackageFact, ServiceFact, TuningProfile

HEALTHY_SAPCONF_SERVICES = {"sapconf.service": (True, True), "tuned.service": (True, False)}


class FakeFacts:
    """Canned host facts; records every read."""

    def __init__(
        self,
        *,
        os_id: str = "sles",
        version_id: str = "15.4",
        packages: Optional[Dict[str, Optional[str]]] = None,
        services: Optional[Dict[str, Tuple[bool, bool]]] = None,
        profile: str = "sapconf",
        config: Optional[Dict[str, str]] = None,
        broken: Iterable[str] = (),
    ) -> None:
        self.os_id = os_id
        self.version_id = version_id
        self.packages = packages if packages is not None else {"sapconf": "5.0.5", "saptune": "3.1.2"}
        self.services = services if services is not None else dict(HEALTHY_SAPCONF_SERVICES)
        self.profile = profile
        self.config = config if config is not None else {"TUNE_FOR_SOLUTIONS": "HANA", "TUNE_FOR_NOTES": ""}
        self.broken = set(broken)
        self.calls: List[str] = []

    def _read(self, fact: str) -> None:
        self.calls.append(fact)
        if fact in self.broken:
            raise FactError(f"{fact} is unreadable")

    def os_release(self) -> OSRelease:
        self._read("os_release")
        return OSRelease(id=self.os_id, version_id=self.version_id, pretty_name=f"{self.os_id} {self.version_id}")

    def package(self, name: str) -> PackageFact:
        self._read(f"package:{name}")
        version = self.packages.get(name)
        if version is None:
            return PackageFact(name=name, installed=False)
        return PackageFact(name=name, installed=True, version=version)

    def service(self, name: str) -> ServiceFact:
        self._read(f"service:{name}")
        active, enabled = self.services.get(name, (False, False))
        return ServiceFact(name=name, active=active, enabled=enabled)

    def tuning_profile(self) -> TuningProfile:
        self._read("tuning_profile")
        return TuningProfile(active_name=self.profile)

    def config_entries(self, path: str, names: Sequence[str]) -> Dict[str, str]:
        self._read("config")
        return {name: self.config.get(name, "") for name in names}


@pytest.fixture
def make_facts():
    return FakeFacts
