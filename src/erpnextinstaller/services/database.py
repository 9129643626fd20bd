"""One-time MariaDB hardening and charset configuration."""

import os
from pathlib import Path

from erpnextinstaller.constants import MARIADB_CONFIG, MARIADB_CONFIG_PATH
from erpnextinstaller.errors import InstallerError
from erpnextinstaller.models import CommandSpec


class DatabaseBootstrapper:
    """Configures MariaDB once, guarded by a marker file in the bench user's home."""

    HARDENING_STATEMENTS = (
        "DELETE FROM mysql.user WHERE User='';",
        "DROP DATABASE IF EXISTS test;",
        "FLUSH PRIVILEGES;",
    )

    def __init__(self, runner, logger, console, marker_path: str, config_path: str = MARIADB_CONFIG_PATH):
        self.runner = runner
        self.logger = logger
        self.console = console
        self.marker_path = Path(marker_path)
        self.config_path = Path(config_path)

    def is_bootstrapped(self) -> bool:
        return self.marker_path.is_file()

    def bootstrap(self, root_password: str) -> bool:
        if self.is_bootstrapped():
            self.console.print("[green]MariaDB already configured (marker found).[/green]")
            return False

        self.console.print("[blue]Configuring MariaDB root password and basic hardening...[/blue]")
        escaped = root_password.replace("\\", "\\\\").replace("'", "\\'")
        # the password must not appear on argv
        self.runner.run(
            CommandSpec(
                args=("mysql",),
                stdin=f"ALTER USER 'root'@'localhost' IDENTIFIED BY '{escaped}';\n",
                secrets=(escaped, root_password),
                description="Setting MariaDB root password",
            ),
            check=False,
        )
        for statement in self.HARDENING_STATEMENTS:
            self.runner.run(
                CommandSpec(
                    args=("mysql", "-u", "root", "-e", statement),
                    env={"MYSQL_PWD": root_password},
                ),
                check=False,
            )

        self.console.print("[blue]Applying utf8mb4 defaults...[/blue]")
        self.write_config()
        self.runner.run(CommandSpec(args=("systemctl", "restart", "mariadb"), description="Restarting MariaDB"))
        self.write_marker()
        self.console.print("[green]MariaDB configured.[/green]")
        return True

    def write_config(self):
        try:
            os.makedirs(self.config_path.parent, exist_ok=True)
            self.config_path.write_text(MARIADB_CONFIG, encoding="utf-8")
        except OSError as exc:
            raise InstallerError(f"Could not write MariaDB config '{self.config_path}': {exc}") from exc
        self.logger.info("Wrote MariaDB config to %s", self.config_path)

    def write_marker(self):
        try:
            self.marker_path.touch()
        except OSError as exc:
            raise InstallerError(f"Could not write marker file '{self.marker_path}': {exc}") from exc
        self.logger.info("Wrote MariaDB marker to %s", self.marker_path)
