"""Shared constants for the ERPNext installer."""

DEFAULT_LOG_FILE = "/var/log/erpnext-installer.log"
DEFAULT_CONFIG_FILE = ".erpnext-installer.yml"

SUPPORTED_DISTROS = ("ubuntu", "debian")
OS_RELEASE_PATH = "/etc/os-release"

APT_GET = ("apt-get", "-y", "-o", "Dpkg::Options::=--force-confnew")
APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}

BASE_PACKAGES = (
    "sudo",
    "ca-certificates",
    "curl",
    "git",
    "gnupg",
    "lsb-release",
    "software-properties-common",
    "build-essential",
    "pkg-config",
    "libffi-dev",
    "libssl-dev",
    "zlib1g-dev",
    "libbz2-dev",
    "libreadline-dev",
    "libsqlite3-dev",
    "libncursesw5-dev",
    "xz-utils",
    "tk-dev",
    "liblzma-dev",
    "wget",
)
DATA_SERVICE_PACKAGES = (
    "redis-server",
    "mariadb-server",
    "mariadb-client",
    "xvfb",
    "fontconfig",
    "wkhtmltopdf",
)
PDF_FALLBACK_PACKAGES = tuple(name for name in DATA_SERVICE_PACKAGES if name != "wkhtmltopdf")
PYTHON_BUILD_PACKAGES = ("python3-dev", "python3-venv", "python3-pip")
PRODUCTION_PACKAGES = ("nginx", "supervisor", "fail2ban")

DEADSNAKES_PPA = "ppa:deadsnakes/ppa"

MARIADB_MARKER_NAME = ".mariadb_configured.marker"
MARIADB_CONFIG_PATH = "/etc/mysql/conf.d/frappe.cnf"
MARIADB_CONFIG = """[mysqld]
character-set-client-handshake = FALSE
character-set-server = utf8mb4
collation-server = utf8mb4_unicode_ci

[mysql]
default-character-set = utf8mb4
"""

NVM_INSTALL_URL = "https://raw.githubusercontent.com/nvm-sh/nvm/v0.40.3/install.sh"
NVM_LOAD = 'export NVM_DIR="$HOME/.nvm"; [ -s "$NVM_DIR/nvm.sh" ] && . "$NVM_DIR/nvm.sh"'

BENCH_PACKAGE = "frappe-bench"
BENCH_DIR_NAME = "frappe-bench"
ERPNEXT_APP = "erpnext"
HRMS_APP = "hrms"

CERTBOT_SNAP_PATH = "/snap/bin/certbot"
CERTBOT_LINK_PATH = "/usr/bin/certbot"

DEV_SERVER_PORT = 8000
SECRET_MASK = "******"
