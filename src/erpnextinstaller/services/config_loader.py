"""Configuration loader for the ERPNext installer."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from erpnextinstaller.errors import ConfigurationError
from erpnextinstaller.services.prompts import parse_yes_no
from erpnextinstaller.services.versions import VersionMatrix


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    SUPPORTED_KEYS = {
        "version",
        "site",
        "db_root_pass",
        "admin_pass",
        "prod",
        "install_erpnext",
        "install_hrms",
        "ssl",
        "email",
        "assume_yes",
        "log_file",
        "verbose",
    }
    YES_NO_KEYS = ("prod", "install_erpnext", "install_hrms", "ssl", "assume_yes", "verbose")
    NON_EMPTY_KEYS = ("site", "db_root_pass", "admin_pass", "email")

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ConfigurationError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise ConfigurationError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise ConfigurationError(f"Unknown configuration keys: {unknown_list}")

        # YAML reads bare 15 as an int
        if parsed.get("version") is not None:
            parsed["version"] = str(parsed["version"])
            if parsed["version"] not in VersionMatrix.VALID_VERSIONS:
                raise ConfigurationError(
                    f"Invalid version '{parsed['version']}' in {config_path}. "
                    f"Use {'|'.join(VersionMatrix.VALID_VERSIONS)}."
                )

        for key in self.YES_NO_KEYS:
            if parsed.get(key) is not None and parse_yes_no(parsed[key]) is None:
                raise ConfigurationError(f"Invalid value for '{key}' in {config_path}: {parsed[key]}. Use yes|no.")

        for key in self.NON_EMPTY_KEYS:
            if key in parsed and parsed[key] is not None and not str(parsed[key]).strip():
                raise ConfigurationError(f"'{key}' in {config_path} must not be empty.")

        return parsed
