import pytest

from erpnextinstaller.errors import ExternalCommandError, UnsupportedPlatformError
from erpnextinstaller.models import HostFacts
from erpnextinstaller.services.command_runner import CommandResult, CommandRunner
from erpnextinstaller.services.runtime import RuntimeService
from erpnextinstaller.services.versions import VersionMatrix


class DummyLogger:
    def info(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


class FakeRunner:
    def __init__(self, outputs=None, failing=(), missing=()):
        self.outputs = outputs or {}
        self.failing = list(failing)
        self.missing = list(missing)
        self.calls = []

    def run(self, spec, check=True):
        argv = CommandRunner.build_argv(spec)
        command = " ".join(argv)
        self.calls.append((spec, check))
        if argv[0] in self.missing:
            if check:
                raise ExternalCommandError(f"Required command not found: {argv[0]}", command=argv, returncode=127)
            return CommandResult(argv, 127, "")
        output = ""
        for needle, value in self.outputs.items():
            if needle in command:
                output = value.pop(0) if isinstance(value, list) else value
        returncode = 1 if any(needle in command for needle in self.failing) else 0
        if returncode and check:
            raise ExternalCommandError(f"Command failed: {command}", command=argv, returncode=returncode)
        return CommandResult(argv, returncode, output)

    def commands(self):
        return [" ".join(CommandRunner.build_argv(spec)) for spec, _ in self.calls]


class FakeApt:
    def __init__(self):
        self.calls = []

    def install(self, packages, check=True):
        self.calls.append(("install", tuple(packages)))

    def update(self):
        self.calls.append(("update",))

    def add_repository(self, repository):
        self.calls.append(("add_repository", repository))


def _host(distro="ubuntu"):
    return HostFacts(
        distro=distro,
        distro_version="22.04",
        python_version="3.8",
        frappe_user="frappe",
        frappe_home="/home/frappe",
    )


def _service(runner, apt=None):
    return RuntimeService(runner, apt or FakeApt(), logger=DummyLogger(), console=DummyConsole())


def test_detect_python_version_reads_last_line():
    runner = FakeRunner(outputs={"python3 -c": "3.12"})

    assert _service(runner).detect_python_version() == "3.12"


def test_detect_python_version_defaults_when_missing():
    runner = FakeRunner(missing=["python3"])

    assert _service(runner).detect_python_version() == "0.0"


def test_detect_server_ip_uses_first_address():
    runner = FakeRunner(outputs={"hostname -I": "10.1.2.3 172.17.0.1 fe80::1"})

    assert _service(runner).detect_server_ip() == "10.1.2.3"


def test_detect_server_ip_none_without_output():
    assert _service(FakeRunner()).detect_server_ip() is None


def test_ensure_python_skips_install_when_floor_met():
    runner = FakeRunner(outputs={"python3 -c": "3.12"})
    apt = FakeApt()

    assert _service(runner, apt).ensure_python(VersionMatrix().resolve("15"), _host()) == "3.12"
    assert apt.calls == [("install", ("python3-dev", "python3-venv", "python3-pip"))]
    assert runner.calls[-1][1] is False


def test_ensure_python_installs_deadsnakes_on_ubuntu():
    runner = FakeRunner(outputs={"python3 -c": ["3.8", "3.10"]})
    apt = FakeApt()

    current = _service(runner, apt).ensure_python(VersionMatrix().resolve("14"), _host("ubuntu"))

    assert current == "3.10"
    assert apt.calls[:3] == [
        ("add_repository", "ppa:deadsnakes/ppa"),
        ("update",),
        ("install", ("python3.10", "python3.10-dev", "python3.10-venv")),
    ]
    assert any(command.startswith("update-alternatives") for command in runner.commands())


def test_ensure_python_on_debian_requires_manual_install():
    runner = FakeRunner(outputs={"python3 -c": "3.9"})
    apt = FakeApt()

    with pytest.raises(UnsupportedPlatformError, match="On Debian"):
        _service(runner, apt).ensure_python(VersionMatrix().resolve("14"), _host("debian"))

    assert apt.calls == []


def test_ensure_python_strict_tier_fails_without_fallback():
    runner = FakeRunner(outputs={"python3 -c": "3.12"})
    apt = FakeApt()

    with pytest.raises(UnsupportedPlatformError, match="Python 3.14"):
        _service(runner, apt).ensure_python(VersionMatrix().resolve("16"), _host("ubuntu"))

    assert apt.calls == []


def test_install_node_runs_as_target_user_pinned_to_floor():
    runner = FakeRunner()

    _service(runner).install_node(VersionMatrix().resolve("16"), "frappe")

    assert all(spec.user == "frappe" for spec, _ in runner.calls)
    scripts = [spec.args[0] for spec, _ in runner.calls]
    assert "nvm-sh/nvm/v0.40.3/install.sh" in scripts[0]
    assert "nvm install 24" in scripts[1]
    assert "nvm alias default 24" in scripts[1]
    assert "corepack enable" in scripts[2]
    assert "npm i -g yarn" in scripts[2]


def test_install_node_failure_is_fatal():
    runner = FakeRunner(failing=["nvm install"])

    with pytest.raises(ExternalCommandError):
        _service(runner).install_node(VersionMatrix().resolve("15"), "frappe")
