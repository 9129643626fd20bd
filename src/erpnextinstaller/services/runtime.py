"""Python and Node.js toolchain setup for the bench user."""

from typing import Optional

from erpnextinstaller.constants import DEADSNAKES_PPA, NVM_INSTALL_URL, NVM_LOAD, PYTHON_BUILD_PACKAGES
from erpnextinstaller.errors import ExternalCommandError, UnsupportedPlatformError
from erpnextinstaller.errors_catalog import actionable_error
from erpnextinstaller.models import CommandSpec, HostFacts, VersionRequirements
from erpnextinstaller.services.versions import version_at_least


class RuntimeService:
    """Detects and installs the Python and Node runtimes bench needs."""

    PYTHON_VERSION_SCRIPT = "import sys; print(f'{sys.version_info.major}.{sys.version_info.minor}')"

    def __init__(self, runner, apt, logger, console):
        self.runner = runner
        self.apt = apt
        self.logger = logger
        self.console = console

    def detect_python_version(self) -> str:
        try:
            result = self.runner.run(CommandSpec(args=("python3", "-c", self.PYTHON_VERSION_SCRIPT)), check=False)
        except ExternalCommandError:
            return "0.0"
        lines = [line.strip() for line in result.output.splitlines() if line.strip()]
        if not result.ok or not lines:
            return "0.0"
        return lines[-1]

    def detect_server_ip(self) -> Optional[str]:
        try:
            result = self.runner.run(CommandSpec(args=("hostname", "-I")), check=False)
        except ExternalCommandError:
            return None
        tokens = result.output.split() if result.ok else []
        return tokens[0] if tokens else None

    def ensure_python(self, requirements: VersionRequirements, host: HostFacts) -> str:
        current = self.detect_python_version()
        self.console.print(f"[blue]Detected Python: {current}[/blue]")

        if not version_at_least(current, requirements.min_python):
            if requirements.strict_python:
                raise UnsupportedPlatformError(
                    actionable_error(
                        "python_too_old_strict",
                        required=requirements.min_python,
                        version=requirements.version,
                        found=current,
                    )
                )
            if host.distro != "ubuntu":
                raise UnsupportedPlatformError(
                    actionable_error("python_manual_install", required=requirements.min_python, found=current)
                )
            self._install_deadsnakes_python(requirements.min_python, current)
            current = self.detect_python_version()

        self.apt.install(PYTHON_BUILD_PACKAGES)
        self.runner.run(
            CommandSpec(args=("python3", "-m", "pip", "install", "--upgrade", "pip", "setuptools", "wheel")),
            check=False,
        )
        return current

    def _install_deadsnakes_python(self, required: str, current: str):
        self.console.print(
            f"[yellow]Python {required}+ required, but system has {current}. "
            "Installing newer Python via OS repos where possible...[/yellow]"
        )
        self.apt.add_repository(DEADSNAKES_PPA)
        self.apt.update()
        self.apt.install((f"python{required}", f"python{required}-dev", f"python{required}-venv"))
        self.runner.run(
            CommandSpec(
                args=(
                    "update-alternatives",
                    "--install",
                    "/usr/bin/python3",
                    "python3",
                    f"/usr/bin/python{required}",
                    "2",
                )
            ),
            check=False,
        )

    def install_node(self, requirements: VersionRequirements, user: str):
        node = requirements.min_node
        self.console.print("[blue]Installing nvm...[/blue]")
        self.runner.run(CommandSpec(args=(f"curl -fsSL {NVM_INSTALL_URL} | bash",), user=user, shell=True))
        self.runner.run(
            CommandSpec(
                args=(f"{NVM_LOAD}; nvm install {node}; nvm alias default {node}; node -v; npm -v",),
                user=user,
                shell=True,
            )
        )
        self.runner.run(
            CommandSpec(
                args=(f"{NVM_LOAD}; corepack enable || true; (yarn -v || npm i -g yarn)",),
                user=user,
                shell=True,
            )
        )
        self.console.print(f"[green]Node + Yarn installed (Node >= {node}).[/green]")
