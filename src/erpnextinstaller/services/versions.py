"""ERPNext release channels and runtime floors."""

from typing import Dict, List

from packaging import version as packaging_version

from erpnextinstaller.errors import ConfigurationError
from erpnextinstaller.models import VersionRequirements

_REQUIREMENTS: Dict[str, VersionRequirements] = {
    "13": VersionRequirements(version="13", branch="version-13", min_python="3.10", min_node="18"),
    "14": VersionRequirements(version="14", branch="version-14", min_python="3.10", min_node="18"),
    "15": VersionRequirements(version="15", branch="version-15", min_python="3.10", min_node="18"),
    "16": VersionRequirements(
        version="16",
        branch="version-16",
        min_python="3.14",
        min_node="24",
        strict_python=True,
        min_os_versions={"ubuntu": "24.04"},
    ),
}


def parse_version(value: str) -> packaging_version.Version:
    try:
        return packaging_version.parse((value or "").strip())
    except packaging_version.InvalidVersion:
        return packaging_version.parse("0.0")


def version_at_least(current: str, minimum: str) -> bool:
    return parse_version(current) >= parse_version(minimum)


class VersionMatrix:
    """Maps an ERPNext major version to its branch and minimum runtimes."""

    VALID_VERSIONS: List[str] = list(_REQUIREMENTS)

    def resolve(self, erp_version: str) -> VersionRequirements:
        requirements = _REQUIREMENTS.get(str(erp_version).strip())
        if requirements is None:
            raise ConfigurationError(
                f"Invalid version '{erp_version}'. Use {'|'.join(self.VALID_VERSIONS)}."
            )
        return requirements

    def branch_for(self, erp_version: str) -> str:
        return self.resolve(erp_version).branch
