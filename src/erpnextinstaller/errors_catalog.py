"""Actionable error catalog for the ERPNext installer."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "not_root": {
        "what": "The installer must run as root.",
        "next": "Re-run with `sudo -E erpnext-installer ...`.",
    },
    "root_target_user": {
        "what": "Refusing to install bench as root.",
        "next": "Run via sudo from a regular account, or set FRAPPE_USER to a non-root user.",
    },
    "home_not_found": {
        "what": "Cannot resolve home directory for user: {user}",
        "next": "Create the account with a home directory or set FRAPPE_USER to another user.",
    },
    "unsupported_distro": {
        "what": "Unsupported distro: {distro}.",
        "next": "Use Ubuntu or Debian.",
    },
    "os_too_old": {
        "what": "ERPNext v{version} requires {distro} {minimum}+ (found {found}).",
        "next": "Upgrade the operating system or choose an older ERPNext version.",
    },
    "python_too_old_strict": {
        "what": "Python {required}+ is required for v{version}, but the system has {found}.",
        "next": "Install Python {required}+ and re-run the installer.",
    },
    "python_manual_install": {
        "what": "Python {required}+ is required, but the system has {found}.",
        "next": "On Debian, install Python {required}+ (backports or a custom build) and re-run.",
    },
    "missing_ssl_email": {
        "what": "Email is required for SSL.",
        "next": "Pass `--email` or disable SSL with `--ssl no`.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
