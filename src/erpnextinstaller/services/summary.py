"""Final access instructions printed after a successful install."""

from typing import List

from erpnextinstaller.constants import BENCH_DIR_NAME, DEV_SERVER_PORT
from erpnextinstaller.models import HostFacts, InstallConfig

RULE = "-" * 80


class SummaryReporter:
    def __init__(self, logger, console, log_file: str):
        self.logger = logger
        self.console = console
        self.log_file = log_file

    def build(self, config: InstallConfig, host: HostFacts) -> List[str]:
        lines = [f"Installation completed for ERPNext/Frappe v{config.version} (branch: {config.branch})."]
        if config.production:
            if config.ssl:
                lines.append(f"Access: https://{config.site_name}")
            elif host.server_ip:
                lines.append(f"Access: http://{config.site_name}  (or http://{host.server_ip} if DNS not set)")
            else:
                lines.append(f"Access: http://{config.site_name}")
        else:
            bench_dir = f"{host.frappe_home}/{BENCH_DIR_NAME}"
            lines.append("Start dev server:")
            lines.append(f"  sudo -u {host.frappe_user} bash -lc 'cd {bench_dir} && bench start'")
            lines.append(f"Then open: http://{host.server_ip or 'localhost'}:{DEV_SERVER_PORT}")
        lines.append(f"Log file: {self.log_file}")
        return lines

    def report(self, config: InstallConfig, host: HostFacts) -> List[str]:
        lines = self.build(config, host)
        self.console.print(RULE)
        self.console.print(f"[green]{lines[0]}[/green]")
        for line in lines[1:]:
            self.console.print(line, markup=False, highlight=False)
        self.console.print(RULE)
        for line in lines:
            self.logger.debug(line)
        return lines
