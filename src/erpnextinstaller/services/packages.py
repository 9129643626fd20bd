"""APT package management for the ERPNext installer."""

from typing import Iterable

from erpnextinstaller.constants import (
    APT_ENV,
    APT_GET,
    BASE_PACKAGES,
    DATA_SERVICE_PACKAGES,
    PDF_FALLBACK_PACKAGES,
)
from erpnextinstaller.errors import ExternalCommandError
from erpnextinstaller.models import CommandSpec


class AptService:
    """Non-interactive apt-get wrapper that prefers new config files."""

    def __init__(self, runner, logger, console):
        self.runner = runner
        self.logger = logger
        self.console = console

    def _apt(self, *args: str) -> CommandSpec:
        return CommandSpec(args=APT_GET + tuple(args), env=dict(APT_ENV))

    def update(self):
        self.runner.run(self._apt("update"))

    def upgrade(self):
        self.console.print("[blue]Updating system packages...[/blue]")
        self.update()
        self.runner.run(self._apt("upgrade"))
        self.console.print("[green]System updated.[/green]")

    def install(self, packages: Iterable[str], check: bool = True):
        package_list = list(packages)
        self.logger.info("Installing packages: %s", " ".join(package_list))
        return self.runner.run(self._apt("install", *package_list), check=check)

    def install_base(self):
        self.console.print("[blue]Installing base dependencies...[/blue]")
        self.install(BASE_PACKAGES)
        self.console.print("[green]Base dependencies installed.[/green]")

    def install_data_services(self) -> bool:
        """Installs Redis, MariaDB and the PDF toolchain.

        Returns False when wkhtmltopdf was unavailable and only the reduced
        package set could be installed.
        """
        self.console.print("[blue]Installing Redis, MariaDB, and PDF dependencies...[/blue]")
        full_install = True
        try:
            self.install(DATA_SERVICE_PACKAGES)
        except ExternalCommandError as exc:
            self.logger.debug("Full data-service install failed: %s", exc)
            self.console.print(
                "[yellow]wkhtmltopdf install failed from distro repos. Retrying with minimal deps...[/yellow]"
            )
            self.install(PDF_FALLBACK_PACKAGES)
            full_install = False
        self.console.print("[green]Database/cache/pdf dependencies installed.[/green]")
        return full_install

    def add_repository(self, repository: str):
        self.runner.run(CommandSpec(args=("add-apt-repository", "-y", repository), env=dict(APT_ENV)))
