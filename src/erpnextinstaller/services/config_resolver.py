"""Merges CLI flags, config file, environment and prompts into one configuration."""

from typing import Any, Dict, Mapping, Optional, Sequence

from erpnextinstaller.errors import ConfigurationError
from erpnextinstaller.errors_catalog import actionable_error
from erpnextinstaller.models import InstallConfig
from erpnextinstaller.services.prompts import parse_yes_no
from erpnextinstaller.services.versions import VersionMatrix


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config and config[key] is not None:
        return config[key]
    return default


class ConfigResolver:
    """Builds the immutable InstallConfig.

    Unset values fall back to prompts, or to documented defaults when
    ``assume_yes`` is active. Settings with no sensible default (site name,
    passwords, certificate email) are errors in that mode.
    """

    DEFAULT_VERSION = "15"
    DEFAULT_PRODUCTION = True
    DEFAULT_INSTALL_ERPNEXT = True
    DEFAULT_INSTALL_HRMS = False
    DEFAULT_SSL = False

    def __init__(self, prompter, logger, version_matrix: Optional[VersionMatrix] = None):
        self.prompter = prompter
        self.logger = logger
        self.version_matrix = version_matrix or VersionMatrix()

    def resolve(
        self,
        cli_values: Mapping[str, Any],
        file_values: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
        extra_args: Sequence[str] = (),
    ) -> InstallConfig:
        self.ensure_no_unknown_arguments(extra_args)

        file_values = dict(file_values or {})
        environ = environ or {}
        values: Dict[str, Any] = {
            key: _resolve_option(cli_values.get(key), file_values, key)
            for key in set(cli_values) | set(file_values)
        }

        assume_yes = self._assume_yes(values.get("assume_yes"), environ)

        erp_version = values.get("version")
        if erp_version is None or not str(erp_version).strip():
            if assume_yes:
                erp_version = self.DEFAULT_VERSION
            else:
                erp_version = self.prompter.ask_choice(
                    "Select ERPNext/Frappe version to install:",
                    self.version_matrix.VALID_VERSIONS,
                )
        erp_version = str(erp_version).strip()
        branch = self.version_matrix.branch_for(erp_version)

        production = self._yes_no(
            values.get("prod"),
            "prod",
            "Do production setup (nginx + supervisor)?",
            self.DEFAULT_PRODUCTION,
            assume_yes,
        )

        site_name = values.get("site")
        if site_name is None:
            if assume_yes:
                raise ConfigurationError("Site name is required. Pass --site when using --assume-yes.")
            site_name = self.prompter.ask_text("Enter site name (FQDN recommended if SSL)")
        site_name = str(site_name).strip()
        if not site_name:
            raise ConfigurationError("Site name is required.")

        db_root_password = self._secret(
            values.get("db_root_pass"),
            "db-root-pass",
            "Enter MariaDB root password",
            assume_yes,
            notice="MariaDB root password will be configured/updated.",
        )
        admin_password = self._secret(
            values.get("admin_pass"),
            "admin-pass",
            "Enter ERPNext Administrator password",
            assume_yes,
        )

        install_erpnext = self._yes_no(
            values.get("install_erpnext"),
            "install-erpnext",
            "Install ERPNext app?",
            self.DEFAULT_INSTALL_ERPNEXT,
            assume_yes,
        )

        install_hrms = False
        ssl = False
        ssl_requested = False
        if production:
            install_hrms = self._yes_no(
                values.get("install_hrms"),
                "install-hrms",
                "Install HRMS app?",
                self.DEFAULT_INSTALL_HRMS,
                assume_yes,
            )
            ssl = self._yes_no(
                values.get("ssl"),
                "ssl",
                "Install SSL via certbot now?",
                self.DEFAULT_SSL,
                assume_yes,
            )
            ssl_requested = ssl
        else:
            ssl_requested = bool(self._parse_flag(values.get("ssl"), "ssl"))
            for key in ("install_hrms", "ssl"):
                if parse_yes_no(values.get(key)):
                    self.logger.warning("Ignoring %s: it only applies to production setup.", key)

        # a certificate request needs an email even when production is off
        email = values.get("email")
        email = str(email).strip() if email is not None else None
        if ssl_requested and not email:
            if assume_yes:
                raise ConfigurationError(actionable_error("missing_ssl_email"))
            email = self.prompter.ask_text("Enter email for Let's Encrypt")
            if not email:
                raise ConfigurationError(actionable_error("missing_ssl_email"))

        return InstallConfig(
            version=erp_version,
            branch=branch,
            site_name=site_name,
            db_root_password=db_root_password,
            admin_password=admin_password,
            production=production,
            install_erpnext=install_erpnext,
            install_hrms=install_hrms,
            ssl=ssl,
            email=email or None,
            assume_yes=assume_yes,
        )

    @staticmethod
    def ensure_no_unknown_arguments(extra_args: Sequence[str]):
        if extra_args:
            raise ConfigurationError(f"Unknown argument: {extra_args[0]}")

    @staticmethod
    def _assume_yes(value, environ: Mapping[str, str]) -> bool:
        if value is not None:
            parsed = parse_yes_no(value)
            if parsed is None:
                raise ConfigurationError(f"Invalid value for assume_yes: {value}")
            if parsed:
                return True
        return bool(parse_yes_no(environ.get("ASSUME_YES", "")))

    @staticmethod
    def _parse_flag(value, option: str) -> Optional[bool]:
        if value is None:
            return None
        parsed = parse_yes_no(value)
        if parsed is None:
            raise ConfigurationError(f"Invalid value for --{option}: {value}. Use yes|no.")
        return parsed

    def _yes_no(self, value, option: str, question: str, default: bool, assume_yes: bool) -> bool:
        if value is not None:
            return self._parse_flag(value, option)
        if assume_yes:
            return default
        return self.prompter.ask_yes_no(question, default)

    def _secret(self, value, option: str, question: str, assume_yes: bool, notice: Optional[str] = None) -> str:
        if value:
            return str(value)
        if assume_yes:
            raise ConfigurationError(f"--{option} is required when using --assume-yes.")
        if notice:
            self.prompter.console.print(f"[yellow]{notice}[/yellow]")
        return self.prompter.ask_secret_twice(question)
