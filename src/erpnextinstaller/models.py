"""Shared domain models for the ERPNext installer."""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from erpnextinstaller.constants import SECRET_MASK


@dataclass(frozen=True)
class InstallConfig:
    """Resolved installation settings, immutable once built."""

    version: str
    branch: str
    site_name: str
    db_root_password: str = field(repr=False)
    admin_password: str = field(repr=False)
    production: bool
    install_erpnext: bool
    install_hrms: bool
    ssl: bool
    email: Optional[str] = None
    assume_yes: bool = False


@dataclass(frozen=True)
class VersionRequirements:
    """Release channel and runtime floors for one ERPNext major version."""

    version: str
    branch: str
    min_python: str
    min_node: str
    strict_python: bool = False
    min_os_versions: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class HostFacts:
    """Facts about the target host, collected once during preflight."""

    distro: str
    distro_version: str
    python_version: str
    frappe_user: str
    frappe_home: str
    server_ip: Optional[str] = None


@dataclass(frozen=True)
class CommandSpec:
    """An external command: arguments, working directory and effective user.

    When ``shell`` is set, ``args`` holds a single bash snippet. When ``user``
    is set, the command runs in that account's login shell through sudo.
    ``stdin`` is written to the process and never logged.
    """

    args: Tuple[str, ...]
    user: Optional[str] = None
    cwd: Optional[str] = None
    env: Dict[str, str] = field(default_factory=dict)
    shell: bool = False
    secrets: Tuple[str, ...] = field(default=(), repr=False)
    stdin: Optional[str] = field(default=None, repr=False)
    description: Optional[str] = None

    def mask(self, text: str) -> str:
        for secret in self.secrets:
            if secret:
                text = text.replace(secret, SECRET_MASK)
        return text


@dataclass(frozen=True)
class StepResult:
    """Tagged outcome of one pipeline step."""

    name: str
    status: str
    error: Optional[str] = None
    value: Any = None

    @property
    def ok(self) -> bool:
        return self.status != "failed"
