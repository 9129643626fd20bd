"""
erpnext-installer - ERPNext / Frappe bench installer for Ubuntu and Debian
"""

__version__ = "0.1.0"

from .core import ERPNextInstaller, InstallerError

__all__ = ["ERPNextInstaller", "InstallerError"]
