import logging
import os
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape

from .constants import DEFAULT_LOG_FILE, ERPNEXT_APP, MARIADB_CONFIG_PATH, MARIADB_MARKER_NAME
from .errors import InstallerError
from .models import HostFacts, InstallConfig, StepResult, VersionRequirements
from .services.bench import BenchService
from .services.command_runner import CommandRunner
from .services.config_resolver import ConfigResolver
from .services.database import DatabaseBootstrapper
from .services.packages import AptService
from .services.preflight import PreflightService
from .services.production import ProductionService
from .services.prompts import Prompter
from .services.runtime import RuntimeService
from .services.summary import SummaryReporter

console = Console()
logger = logging.getLogger("erpnextinstaller")

Step = Tuple[str, Optional[Callable[[], Any]]]


class ERPNextInstaller:
    # steps that wait on operator input get no spinner
    INTERACTIVE_STEPS = {"resolve_configuration"}

    def __init__(
        self,
        cli_values: Mapping[str, Any],
        file_values: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
        extra_args: Sequence[str] = (),
        log_file: str = DEFAULT_LOG_FILE,
        verbose: bool = False,
        runner: Optional[CommandRunner] = None,
        prompter: Optional[Prompter] = None,
        mariadb_config_path: str = MARIADB_CONFIG_PATH,
    ):
        self.cli_values = dict(cli_values)
        self.file_values = dict(file_values or {})
        self.environ: Dict[str, str] = dict(os.environ if environ is None else environ)
        self.extra_args = list(extra_args)
        self.log_file = log_file
        self.verbose = verbose
        self.mariadb_config_path = mariadb_config_path

        self.runner = runner or CommandRunner(logger=logger, console=console, verbose=verbose)
        self.prompter = prompter or Prompter(console=console)
        self.resolver = ConfigResolver(prompter=self.prompter, logger=logger)
        self.apt = AptService(self.runner, logger=logger, console=console)
        self.runtime_service = RuntimeService(self.runner, self.apt, logger=logger, console=console)
        self.preflight_service = PreflightService(logger=logger, console=console, runtime_service=self.runtime_service)
        self.summary_reporter = SummaryReporter(logger=logger, console=console, log_file=log_file)

        self.config: Optional[InstallConfig] = None
        self.host: Optional[HostFacts] = None
        self.requirements: Optional[VersionRequirements] = None
        self.database_bootstrapper: Optional[DatabaseBootstrapper] = None
        self.bench_service: Optional[BenchService] = None
        self.production_service: Optional[ProductionService] = None
        self.results: List[StepResult] = []

    def resolve_configuration(self) -> InstallConfig:
        self.config = self.resolver.resolve(
            self.cli_values,
            file_values=self.file_values,
            environ=self.environ,
            extra_args=self.extra_args,
        )
        logger.info("Resolved configuration: %s", self.config)
        return self.config

    def preflight(self) -> HostFacts:
        self.host, self.requirements = self.preflight_service.run(self.config, self.environ)

        marker_path = os.path.join(self.host.frappe_home, MARIADB_MARKER_NAME)
        self.database_bootstrapper = DatabaseBootstrapper(
            self.runner,
            logger=logger,
            console=console,
            marker_path=marker_path,
            config_path=self.mariadb_config_path,
        )
        self.bench_service = BenchService(
            self.runner,
            self.apt,
            logger=logger,
            console=console,
            user=self.host.frappe_user,
            home=self.host.frappe_home,
        )
        self.production_service = ProductionService(
            self.runner,
            self.apt,
            self.bench_service,
            logger=logger,
            console=console,
        )
        return self.host

    def bootstrap_database(self) -> bool:
        return self.database_bootstrapper.bootstrap(self.config.db_root_password)

    def install_python(self) -> str:
        return self.runtime_service.ensure_python(self.requirements, self.host)

    def install_node(self):
        self.runtime_service.install_node(self.requirements, self.host.frappe_user)

    def init_bench(self) -> bool:
        return self.bench_service.init_workspace(self.config.branch)

    def create_site(self):
        self.bench_service.new_site(
            self.config.site_name,
            self.config.db_root_password,
            self.config.admin_password,
        )

    def install_erpnext(self):
        self.bench_service.install_app(ERPNEXT_APP, self.config.branch, self.config.site_name)

    def configure_production(self):
        self.production_service.configure(self.config)

    def prepare_development(self):
        self.bench_service.prepare_development(self.config.site_name)

    def report_summary(self) -> List[str]:
        return self.summary_reporter.report(self.config, self.host)

    def steps(self) -> Iterator[Step]:
        """Yields pipeline steps in order.

        Evaluated lazily so later steps can depend on the resolved
        configuration. A ``None`` callback marks a skipped step.
        """
        yield "resolve_configuration", self.resolve_configuration
        yield "preflight", self.preflight
        yield "system_upgrade", self.apt.upgrade
        yield "base_dependencies", self.apt.install_base
        yield "data_services", self.apt.install_data_services
        yield "database_bootstrap", self.bootstrap_database
        yield "python_runtime", self.install_python
        yield "node_runtime", self.install_node
        yield "bench_install", self.bench_service.install_bench
        yield "bench_init", self.init_bench
        yield "new_site", self.create_site
        yield "install_erpnext", self.install_erpnext if self.config.install_erpnext else None
        if self.config.production:
            yield "production_setup", self.configure_production
        else:
            yield "production_setup", None
            yield "development_setup", self.prepare_development
        yield "summary", self.report_summary

    def _run_step(self, name: str, callback: Optional[Callable[[], Any]]) -> StepResult:
        if callback is None:
            logger.info("Skipping step: %s", name)
            if name == "install_erpnext":
                console.print("[yellow]Skipping ERPNext install (bench + site only).[/yellow]")
            result = StepResult(name=name, status="skipped")
            self.results.append(result)
            return result

        logger.info("Step started: %s", name)
        try:
            if name in self.INTERACTIVE_STEPS or self.verbose:
                value = callback()
            else:
                with console.status(f"[bold magenta]{name.replace('_', ' ')}..."):
                    value = callback()
        except InstallerError as exc:
            logger.debug("Step %s failed", name, exc_info=True)
            result = StepResult(name=name, status="failed", error=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error in step %s", name)
            result = StepResult(name=name, status="failed", error=f"Unexpected error: {exc}")
        else:
            logger.info("Step finished: %s", name)
            result = StepResult(name=name, status="success", value=value)

        self.results.append(result)
        return result

    def run(self) -> int:
        logger.info("Starting ERPNext installer...")
        logger.info("Log file: %s", self.log_file)

        try:
            for name, callback in self.steps():
                result = self._run_step(name, callback)
                if not result.ok:
                    console.print(
                        f"[bold red]Error:[/bold red] Failed at step '{name}': {escape(result.error)}",
                        soft_wrap=True,
                    )
                    console.print(f"Check log: {self.log_file}", markup=False, highlight=False, soft_wrap=True)
                    logger.error("Failed at step '%s': %s", name, result.error)
                    return 1
        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            return 130

        return 0
