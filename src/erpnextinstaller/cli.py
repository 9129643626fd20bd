import logging
import os

import click
from rich.logging import RichHandler

from .constants import DEFAULT_CONFIG_FILE, DEFAULT_LOG_FILE
from .core import ERPNextInstaller, InstallerError
from .services.config_loader import ConfigLoader
from .services.config_resolver import _resolve_option

console_handler = RichHandler(rich_tracebacks=True, show_level=False, show_path=False)

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[console_handler],
)


def setup_logging(log_file: str, verbose: bool) -> logging.Logger:
    """Console output through rich, full DEBUG trail appended to ``log_file``."""
    logger = logging.getLogger("erpnextinstaller")
    logger.setLevel(logging.DEBUG)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)

    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            logger.removeHandler(handler)
            handler.close()

    try:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not open log file %s: %s. Logging to console only.", log_file, exc)
        return logger

    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
    logger.addHandler(file_handler)
    return logger


@click.command(
    context_settings={
        "help_option_names": ["-h", "--help"],
        "ignore_unknown_options": True,
        "allow_extra_args": True,
    }
)
@click.option("--version", "erp_version", required=False, metavar="13|14|15|16", help="ERPNext/Frappe version")
@click.option("--site", required=False, help="Site name (FQDN recommended for SSL)")
@click.option("--db-root-pass", required=False, help="MariaDB root password (will be set/updated)")
@click.option("--admin-pass", required=False, help="ERPNext Administrator password")
@click.option("--prod", required=False, metavar="yes|no", help="Production setup (nginx + supervisor)")
@click.option("--install-erpnext", required=False, metavar="yes|no", help="Install the ERPNext app")
@click.option("--install-hrms", required=False, metavar="yes|no", help="Install the HRMS app (production only)")
@click.option("--ssl", required=False, metavar="yes|no", help="Issue a Let's Encrypt certificate (production only)")
@click.option("--email", required=False, help="Email for certbot")
@click.option(
    "--assume-yes",
    is_flag=True,
    default=None,
    help="Skip prompts and use defaults where possible (also ASSUME_YES=1).",
)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option(
    "--log-file",
    required=False,
    envvar="LOG_FILE",
    type=click.Path(),
    help=f"Path to log file (default: {DEFAULT_LOG_FILE}, or LOG_FILE).",
)
@click.option("--verbose", is_flag=True, default=None, help="Echo command output to the console")
@click.pass_context
def main(
    ctx,
    erp_version,
    site,
    db_root_pass,
    admin_pass,
    prod,
    install_erpnext,
    install_hrms,
    ssl,
    email,
    assume_yes,
    config,
    log_file,
    verbose,
):
    """ERPNext / Frappe bench installer for Ubuntu and Debian."""
    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except InstallerError as exc:
        raise click.ClickException(str(exc)) from exc

    log_file = _resolve_option(log_file, config_values, "log_file", default=DEFAULT_LOG_FILE)
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    setup_logging(log_file, verbose)

    cli_values = {
        "version": erp_version,
        "site": site,
        "db_root_pass": db_root_pass,
        "admin_pass": admin_pass,
        "prod": prod,
        "install_erpnext": install_erpnext,
        "install_hrms": install_hrms,
        "ssl": ssl,
        "email": email,
        "assume_yes": assume_yes,
    }

    installer = ERPNextInstaller(
        cli_values=cli_values,
        file_values=config_values,
        environ=os.environ,
        extra_args=ctx.args,
        log_file=log_file,
        verbose=verbose,
    )
    raise SystemExit(installer.run())


if __name__ == "__main__":
    main()
