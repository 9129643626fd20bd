"""Frappe bench provisioning, always run as the bench user."""

import os
import shlex
from typing import Sequence

from erpnextinstaller.constants import BENCH_DIR_NAME, BENCH_PACKAGE, NVM_LOAD
from erpnextinstaller.models import CommandSpec


class BenchService:
    """Installs bench and drives it to build the workspace and sites."""

    def __init__(self, runner, apt, logger, console, user: str, home: str):
        self.runner = runner
        self.apt = apt
        self.logger = logger
        self.console = console
        self.user = user
        self.home = home
        self.bench_dir = os.path.join(home, BENCH_DIR_NAME)

    def _as_user(self, script: str, cwd=None, secrets: Sequence[str] = ()) -> CommandSpec:
        return CommandSpec(
            args=(f"set -e; {NVM_LOAD}; {script}",),
            user=self.user,
            cwd=cwd,
            shell=True,
            secrets=tuple(secrets),
        )

    def _bench(self, *args: str, secrets: Sequence[str] = ()) -> CommandSpec:
        return self._as_user(shlex.join(("bench",) + args), cwd=self.bench_dir, secrets=secrets)

    def has_pipx(self) -> bool:
        result = self.runner.run(
            CommandSpec(args=("command -v pipx >/dev/null 2>&1",), user=self.user, shell=True),
            check=False,
        )
        return result.ok

    def install_bench(self):
        self.console.print("[blue]Installing bench...[/blue]")
        self.apt.install(["pipx"], check=False)
        self.runner.run(
            CommandSpec(args=("python3", "-m", "pipx", "ensurepath"), user=self.user),
            check=False,
        )

        if self.has_pipx():
            self.runner.run(
                CommandSpec(
                    args=(f"pipx install {BENCH_PACKAGE} || pipx upgrade {BENCH_PACKAGE}",),
                    user=self.user,
                    shell=True,
                )
            )
        else:
            self.console.print("[yellow]pipx not available; falling back to pip install.[/yellow]")
            self.runner.run(
                CommandSpec(
                    args=("python3", "-m", "pip", "config", "--global", "set", "global.break-system-packages", "true")
                ),
                check=False,
            )
            self.runner.run(CommandSpec(args=("python3", "-m", "pip", "install", "--upgrade", BENCH_PACKAGE)))
        self.console.print("[green]Bench installed.[/green]")

    def init_workspace(self, branch: str) -> bool:
        """Runs ``bench init`` unless the workspace directory already exists."""
        self.console.print("[blue]Initializing bench...[/blue]")
        if os.path.isdir(self.bench_dir):
            self.console.print(f"[yellow]{BENCH_DIR_NAME} already exists; skipping bench init.[/yellow]")
            return False

        self.runner.run(
            self._as_user(
                shlex.join(("bench", "init", BENCH_DIR_NAME, "--version", branch, "--verbose")),
                cwd=self.home,
            )
        )
        self.console.print("[green]Bench initialized.[/green]")
        return True

    def new_site(self, site_name: str, db_root_password: str, admin_password: str):
        self.console.print(f"[blue]Creating site: {site_name}[/blue]")
        self.runner.run(CommandSpec(args=("chmod", "o+rx", self.home)), check=False)
        self.runner.run(
            self._bench(
                "new-site",
                site_name,
                "--db-root-password",
                db_root_password,
                "--admin-password",
                admin_password,
                secrets=(
                    shlex.quote(db_root_password),
                    shlex.quote(admin_password),
                    db_root_password,
                    admin_password,
                ),
            )
        )
        self.console.print("[green]Site created.[/green]")

    def install_app(self, app: str, branch: str, site_name: str):
        self.console.print(f"[blue]Installing {app} app...[/blue]")
        self.runner.run(self._bench("get-app", app, "--branch", branch))
        self.runner.run(self._bench("--site", site_name, "install-app", app))
        self.console.print(f"[green]{app} installed.[/green]")

    def setup_production(self):
        self.console.print("[blue]Running bench production setup...[/blue]")
        script = shlex.join(("sudo", "bench", "setup", "production", self.user, "--yes"))
        self.runner.run(self._as_user(script, cwd=self.bench_dir))

    def enable_scheduler(self, site_name: str):
        self.runner.run(self._bench("--site", site_name, "scheduler", "enable"))
        self.runner.run(self._bench("--site", site_name, "scheduler", "resume"))

    def prepare_development(self, site_name: str):
        self.console.print("[blue]Development mode selected.[/blue]")
        self.runner.run(self._bench("use", site_name))
        self.runner.run(self._bench("build"))
        self.console.print("[green]Development environment ready.[/green]")
