"""Read the host facts that decide whether sapconf or saptune is set up correctly."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import shlex
import subprocess
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from .config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class FactError(Exception):
    """A host fact could not be read."""


@dataclass(frozen=True)
class OSRelease:
    id: str
    version_id: str
    pretty_name: str = ""


@dataclass(frozen=True)
class PackageFact:
    name: str
    installed: bool
    version: str = ""


@dataclass(frozen=True)
class ServiceFact:
    name: str
    active: bool
    enabled: bool


@dataclass(frozen=True)
class TuningProfile:
    active_name: str

    @property
    def display_name(self) -> str:
        return self.active_name or "(none)"


ConfigEntry = Dict[str, str]


class FactProvider(Protocol):
    def os_release(self) -> OSRelease: ...

    def package(self, name: str) -> PackageFact: ...

    def service(self, name: str) -> ServiceFact: ...

    def tuning_profile(self) -> TuningProfile: ...

    def config_entries(self, path: str, names: Sequence[str]) -> ConfigEntry: ...


def parse_key_values(text: str) -> Dict[str, str]:
    """Parse shell-style ``KEY=value`` lines as found in os-release and sysconfig files."""
    values: Dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, raw_value = line.partition("=")
        key = key.strip()
        if key.startswith("export "):
            key = key[len("export "):].strip()
        try:
            tokens = shlex.split(raw_value, comments=True)
        except ValueError:
            # unbalanced quotes, keep the raw text
            tokens = [raw_value.strip().strip("\"'")]
        values[key] = " ".join(tokens)
    return values


class SystemFactProvider:
    """Fact provider backed by rpm, systemctl and plain files."""

    def __init__(self, config: Optional[Settings] = None) -> None:
        self.settings = config or default_settings

    def os_release(self) -> OSRelease:
        text = self._read_file(self.settings.os_release_path)
        if text is None:
            raise FactError(f"{self.settings.os_release_path} does not exist")
        values = parse_key_values(text)
        return OSRelease(
            id=values.get("ID", ""),
            version_id=values.get("VERSION_ID", ""),
            pretty_name=values.get("PRETTY_NAME", ""),
        )

    def package(self, name: str) -> PackageFact:
        rc, stdout, stderr = self._run(["rpm", "-q", "--qf", "%{VERSION}", name])
        if rc != 0:
            if "is not installed" in stdout or "is not installed" in stderr:
                return PackageFact(name=name, installed=False)
            raise FactError(f"rpm query for {name} failed: {stderr or stdout}")
        return PackageFact(name=name, installed=True, version=stdout)

    def service(self, name: str) -> ServiceFact:
        return ServiceFact(
            name=name,
            active=self._systemctl("is-active", name) == "active",
            enabled=self._systemctl("is-enabled", name) == "enabled",
        )

    def tuning_profile(self) -> TuningProfile:
        text = self._read_file(self.settings.tuned_profile_path)
        return TuningProfile(active_name=(text or "").strip())

    def config_entries(self, path: str, names: Sequence[str]) -> ConfigEntry:
        text = self._read_file(path)
        values = parse_key_values(text or "")
        return {name: values.get(name, "") for name in names}

    def _systemctl(self, verb: str, unit: str) -> str:
        rc, stdout, stderr = self._run(["systemctl", verb, unit])
        # non-zero exit with a state word is the normal "inactive"/"disabled" answer
        if stdout:
            return stdout.splitlines()[0].strip()
        if rc != 0 and ("No such file" in stderr or "not found" in stderr):
            return "not-found"
        if rc != 0:
            raise FactError(f"systemctl {verb} {unit} failed: {stderr or f'exit code {rc}'}")
        return ""

    def _run(self, cmd: List[str]) -> Tuple[int, str, str]:
        logger.debug("Running %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                text=True,
                capture_output=True,
                timeout=self.settings.command_timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.warning("Command %s failed: %s", cmd[0], exc)
            raise FactError(f"could not run {cmd[0]}: {exc}") from exc
        return proc.returncode, (proc.stdout or "").strip(), (proc.stderr or "").strip()

    def _read_file(self, path: str) -> Optional[str]:
        logger.debug("Reading %s", path)
        try:
            with open(path, encoding="utf-8") as handle:
                return handle.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read %s: %s", path, exc)
            raise FactError(f"could not read {path}: {exc}") from exc
