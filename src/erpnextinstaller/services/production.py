"""Production setup: nginx, supervisor, scheduler and Let's Encrypt."""

import os

from erpnextinstaller.constants import CERTBOT_LINK_PATH, CERTBOT_SNAP_PATH, HRMS_APP, PRODUCTION_PACKAGES
from erpnextinstaller.errors import InstallerError
from erpnextinstaller.models import CommandSpec, InstallConfig


class ProductionService:
    """Runs the optional production configuration for a bench site."""

    def __init__(self, runner, apt, bench, logger, console, certbot_link_path: str = CERTBOT_LINK_PATH):
        self.runner = runner
        self.apt = apt
        self.bench = bench
        self.logger = logger
        self.console = console
        self.certbot_link_path = certbot_link_path

    def configure(self, config: InstallConfig):
        self.console.print("[blue]Installing production prerequisites (nginx, supervisor)...[/blue]")
        self.apt.install(PRODUCTION_PACKAGES, check=False)

        self.bench.setup_production()
        self.bench.enable_scheduler(config.site_name)
        self.console.print("[green]Production setup complete.[/green]")

        if config.install_hrms:
            self.bench.install_app(HRMS_APP, config.branch, config.site_name)

        if config.ssl:
            self.issue_certificate(config.site_name, config.email)

        self.console.print("[green]All done (production).[/green]")

    def issue_certificate(self, site_name: str, email: str):
        self.console.print("[blue]Installing certbot and issuing certificate...[/blue]")
        self.apt.install(["snapd"], check=False)
        self.runner.run(CommandSpec(args=("snap", "install", "core")), check=False)
        self.runner.run(CommandSpec(args=("snap", "refresh", "core")), check=False)
        self.runner.run(CommandSpec(args=("snap", "install", "--classic", "certbot")))
        self.link_certbot()
        self.runner.run(
            CommandSpec(
                args=(
                    "certbot",
                    "--nginx",
                    "--non-interactive",
                    "--agree-tos",
                    "--email",
                    email,
                    "-d",
                    site_name,
                )
            )
        )
        self.console.print("[green]SSL installed.[/green]")

    def link_certbot(self):
        try:
            if os.path.lexists(self.certbot_link_path):
                os.remove(self.certbot_link_path)
            os.symlink(CERTBOT_SNAP_PATH, self.certbot_link_path)
        except OSError as exc:
            raise InstallerError(f"Could not link certbot into {self.certbot_link_path}: {exc}") from exc
