from click.testing import CliRunner

import erpnextinstaller.cli as cli_module


class FakeInstaller:
    captured = {}

    def __init__(self, **kwargs):
        FakeInstaller.captured = kwargs

    def run(self):
        return 0


def test_cli_help_exits_successfully():
    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--help"])

    assert result.exit_code == 0
    assert "--db-root-pass" in result.output
    assert "--assume-yes" in result.output


def test_cli_short_help_flag_exits_successfully():
    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["-h"])

    assert result.exit_code == 0


def test_cli_passes_flags_and_config_to_installer(tmp_path, monkeypatch):
    config_file = tmp_path / "installer.yml"
    config_file.write_text("version: 14\nsite: config.local\nprod: no\n", encoding="utf-8")
    monkeypatch.setattr(cli_module, "ERPNextInstaller", FakeInstaller)

    runner = CliRunner()
    result = runner.invoke(
        cli_module.main,
        [
            "--config",
            str(config_file),
            "--site",
            "cli.local",
            "--admin-pass",
            "secret",
            "--log-file",
            str(tmp_path / "install.log"),
        ],
    )

    assert result.exit_code == 0
    captured = FakeInstaller.captured
    assert captured["cli_values"]["site"] == "cli.local"
    assert captured["cli_values"]["admin_pass"] == "secret"
    assert captured["file_values"]["version"] == "14"
    assert captured["file_values"]["prod"] is False
    assert captured["log_file"] == str(tmp_path / "install.log")
    assert captured["extra_args"] == []


def test_cli_uses_default_config_file_when_present(tmp_path, monkeypatch):
    (tmp_path / ".erpnext-installer.yml").write_text("site: default.local\n", encoding="utf-8")
    monkeypatch.setattr(cli_module, "ERPNextInstaller", FakeInstaller)
    monkeypatch.chdir(tmp_path)

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--log-file", str(tmp_path / "install.log")])

    assert result.exit_code == 0
    assert FakeInstaller.captured["file_values"]["site"] == "default.local"


def test_cli_reads_log_file_from_environment(tmp_path, monkeypatch):
    monkeypatch.setattr(cli_module, "ERPNextInstaller", FakeInstaller)
    log_file = tmp_path / "logs" / "env.log"

    runner = CliRunner()
    result = runner.invoke(cli_module.main, [], env={"LOG_FILE": str(log_file)})

    assert result.exit_code == 0
    assert FakeInstaller.captured["log_file"] == str(log_file)
    assert log_file.exists()


def test_cli_forwards_unknown_arguments(tmp_path, monkeypatch):
    monkeypatch.setattr(cli_module, "ERPNextInstaller", FakeInstaller)

    runner = CliRunner()
    result = runner.invoke(
        cli_module.main,
        ["--bogus", "--log-file", str(tmp_path / "install.log")],
    )

    assert result.exit_code == 0
    assert FakeInstaller.captured["extra_args"] == ["--bogus"]


def test_cli_unknown_argument_aborts(tmp_path):
    runner = CliRunner()
    result = runner.invoke(
        cli_module.main,
        ["--bogus", "--log-file", str(tmp_path / "install.log")],
    )

    assert result.exit_code == 1
    assert "Unknown argument: --bogus" in (tmp_path / "install.log").read_text(encoding="utf-8")


def test_cli_rejects_invalid_config_file(tmp_path):
    config_file = tmp_path / "installer.yml"
    config_file.write_text("unknown_key: 1\n", encoding="utf-8")

    runner = CliRunner()
    result = runner.invoke(cli_module.main, ["--config", str(config_file)])

    assert result.exit_code == 1
    assert "Unknown configuration keys" in result.output
