"""Privilege, account and platform checks run before any installation step."""

import os
import pwd
import shlex
from typing import Dict, Mapping, Optional, Tuple

from erpnextinstaller.constants import OS_RELEASE_PATH, SUPPORTED_DISTROS
from erpnextinstaller.errors import ConfigurationError, PrivilegeError, UnsupportedPlatformError
from erpnextinstaller.errors_catalog import actionable_error
from erpnextinstaller.models import HostFacts, InstallConfig, VersionRequirements
from erpnextinstaller.services.versions import VersionMatrix, version_at_least


def parse_os_release(content: str) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, raw_value = line.split("=", 1)
        try:
            parsed = shlex.split(raw_value)
        except ValueError:
            parsed = [raw_value.strip("\"'")]
        values[key.strip()] = parsed[0] if parsed else ""
    return values


class PreflightService:
    """Collects host facts and enforces the installer's platform rules."""

    def __init__(
        self,
        logger,
        console,
        runtime_service,
        version_matrix: Optional[VersionMatrix] = None,
        os_release_path: str = OS_RELEASE_PATH,
        geteuid=os.geteuid,
        getpwnam=pwd.getpwnam,
    ):
        self.logger = logger
        self.console = console
        self.runtime_service = runtime_service
        self.version_matrix = version_matrix or VersionMatrix()
        self.os_release_path = os_release_path
        self.geteuid = geteuid
        self.getpwnam = getpwnam

    def run(self, config: InstallConfig, environ: Mapping[str, str]) -> Tuple[HostFacts, VersionRequirements]:
        self.ensure_root()
        user = self.resolve_target_user(environ)
        home = self.resolve_home(user)
        self.console.print(f"[blue]Installing as user: {user} (home: {home})[/blue]")

        distro, distro_version = self.detect_os()
        self.console.print(f"[blue]Detected OS: {distro} {distro_version}[/blue]")

        requirements = self.version_matrix.resolve(config.version)
        self.console.print(
            f"[blue]Selected: ERPNext/Frappe v{requirements.version} "
            f"(bench branch: {requirements.branch})[/blue]"
        )
        self.console.print(
            f"[blue]Min requirements: Python >= {requirements.min_python}, "
            f"Node >= {requirements.min_node}[/blue]"
        )
        self.ensure_os_supported(requirements, distro, distro_version)

        host = HostFacts(
            distro=distro,
            distro_version=distro_version,
            python_version=self.runtime_service.detect_python_version(),
            frappe_user=user,
            frappe_home=home,
            server_ip=self.runtime_service.detect_server_ip(),
        )
        self.logger.info("Host facts: %s", host)
        return host, requirements

    def ensure_root(self):
        if self.geteuid() != 0:
            raise PrivilegeError(actionable_error("not_root"))

    @staticmethod
    def resolve_target_user(environ: Mapping[str, str]) -> str:
        for key in ("FRAPPE_USER", "SUDO_USER", "USER"):
            user = (environ.get(key) or "").strip()
            if user:
                break
        else:
            user = ""

        if not user or user == "root":
            raise PrivilegeError(actionable_error("root_target_user"))
        return user

    def resolve_home(self, user: str) -> str:
        try:
            home = self.getpwnam(user).pw_dir
        except KeyError as exc:
            raise ConfigurationError(actionable_error("home_not_found", user=user)) from exc

        if not home or not os.path.isdir(home):
            raise ConfigurationError(actionable_error("home_not_found", user=user))
        return home

    def detect_os(self) -> Tuple[str, str]:
        try:
            with open(self.os_release_path, "r", encoding="utf-8") as file_obj:
                values = parse_os_release(file_obj.read())
        except OSError as exc:
            raise UnsupportedPlatformError(
                f"Cannot detect OS (missing {self.os_release_path})."
            ) from exc

        distro = values.get("ID", "").lower()
        distro_version = values.get("VERSION_ID", "")
        if distro not in SUPPORTED_DISTROS:
            raise UnsupportedPlatformError(actionable_error("unsupported_distro", distro=distro or "<unknown>"))
        return distro, distro_version

    @staticmethod
    def ensure_os_supported(requirements: VersionRequirements, distro: str, distro_version: str):
        minimum = requirements.min_os_versions.get(distro)
        if minimum and not version_at_least(distro_version, minimum):
            raise UnsupportedPlatformError(
                actionable_error(
                    "os_too_old",
                    version=requirements.version,
                    distro=distro.capitalize(),
                    minimum=minimum,
                    found=distro_version or "<unknown>",
                )
            )
