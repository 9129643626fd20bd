import pytest

from erpnextinstaller.errors import ConfigurationError
from erpnextinstaller.services.config_resolver import ConfigResolver


class DummyLogger:
    def warning(self, *_args, **_kwargs):
        return None


class DummyConsole:
    def print(self, *_args, **_kwargs):
        return None


class ScriptedPrompter:
    """Answers prompts from a dict keyed by method name, recording every call."""

    def __init__(self, **answers):
        self.answers = {key: list(value) for key, value in answers.items()}
        self.console = DummyConsole()
        self.calls = []

    def _next(self, kind, question):
        self.calls.append((kind, question))
        if not self.answers.get(kind):
            raise AssertionError(f"Unexpected prompt: {kind} {question}")
        return self.answers[kind].pop(0)

    def ask_choice(self, question, choices):
        return self._next("choice", question)

    def ask_yes_no(self, question, default):
        return self._next("yes_no", question)

    def ask_text(self, question):
        return self._next("text", question)

    def ask_secret_twice(self, question):
        return self._next("secret", question)


def _full_flags(**overrides):
    values = {
        "version": "14",
        "site": "erp.local",
        "db_root_pass": "dbpass",
        "admin_pass": "adminpass",
        "prod": "no",
        "install_erpnext": "no",
        "install_hrms": None,
        "ssl": None,
        "email": None,
        "assume_yes": True,
    }
    values.update(overrides)
    return values


def _resolver(prompter=None):
    return ConfigResolver(prompter=prompter or ScriptedPrompter(), logger=DummyLogger())


def test_resolve_non_interactive_without_prompts():
    prompter = ScriptedPrompter()
    config = _resolver(prompter).resolve(_full_flags())

    assert prompter.calls == []
    assert config.version == "14"
    assert config.branch == "version-14"
    assert config.site_name == "erp.local"
    assert config.production is False
    assert config.install_erpnext is False
    assert config.install_hrms is False
    assert config.ssl is False
    assert config.assume_yes is True


def test_resolve_is_idempotent():
    resolver = _resolver()

    assert resolver.resolve(_full_flags()) == resolver.resolve(_full_flags())


def test_resolve_assume_yes_uses_documented_defaults():
    config = _resolver().resolve(
        {"site": "erp.local", "db_root_pass": "a", "admin_pass": "b", "assume_yes": True}
    )

    assert config.version == ConfigResolver.DEFAULT_VERSION
    assert config.production is True
    assert config.install_erpnext is True
    assert config.install_hrms is False
    assert config.ssl is False


def test_resolve_assume_yes_from_environment():
    flags = _full_flags(assume_yes=None, install_erpnext=None)

    config = _resolver().resolve(flags, environ={"ASSUME_YES": "1"})

    assert config.assume_yes is True
    assert config.install_erpnext is True


def test_resolve_cli_overrides_file_values():
    config = _resolver().resolve(
        _full_flags(site="cli.local"),
        file_values={"site": "file.local", "email": "ops@example.com"},
    )

    assert config.site_name == "cli.local"
    assert config.email == "ops@example.com"


def test_resolve_prompts_for_missing_values_in_order():
    prompter = ScriptedPrompter(
        choice=["15"],
        yes_no=[True, True, False, True],
        text=["erp.example.com", "ops@example.com"],
        secret=["dbpass", "adminpass"],
    )

    config = _resolver(prompter).resolve({})

    assert [kind for kind, _ in prompter.calls] == [
        "choice",
        "yes_no",
        "text",
        "secret",
        "secret",
        "yes_no",
        "yes_no",
        "yes_no",
        "text",
    ]
    assert config.version == "15"
    assert config.production is True
    assert config.install_erpnext is True
    assert config.install_hrms is False
    assert config.ssl is True
    assert config.email == "ops@example.com"
    assert config.db_root_password == "dbpass"
    assert config.admin_password == "adminpass"


def test_resolve_empty_site_name_fails_interactively():
    prompter = ScriptedPrompter(text=[""])

    with pytest.raises(ConfigurationError, match="Site name is required"):
        _resolver(prompter).resolve(_full_flags(site=None, assume_yes=None))


def test_resolve_missing_site_fails_in_assume_yes_mode():
    with pytest.raises(ConfigurationError, match="Site name is required"):
        _resolver().resolve(_full_flags(site=None))


def test_resolve_ssl_without_email_fails():
    with pytest.raises(ConfigurationError, match="Email is required for SSL"):
        _resolver().resolve(_full_flags(prod="yes", ssl="yes"))


def test_resolve_ssl_with_empty_prompted_email_fails():
    prompter = ScriptedPrompter(text=[""])

    with pytest.raises(ConfigurationError, match="Email is required for SSL"):
        _resolver(prompter).resolve(_full_flags(prod="yes", ssl="yes", install_hrms="no", assume_yes=None))


def test_resolve_missing_password_fails_in_assume_yes_mode():
    with pytest.raises(ConfigurationError, match="--admin-pass is required"):
        _resolver().resolve(_full_flags(admin_pass=None))


def test_resolve_rejects_invalid_version():
    with pytest.raises(ConfigurationError, match="Invalid version"):
        _resolver().resolve(_full_flags(version="12"))


def test_resolve_rejects_invalid_yes_no_value():
    with pytest.raises(ConfigurationError, match="--prod"):
        _resolver().resolve(_full_flags(prod="maybe"))


def test_resolve_rejects_unknown_arguments():
    with pytest.raises(ConfigurationError, match="Unknown argument: --bogus"):
        _resolver().resolve(_full_flags(), extra_args=["--bogus"])


def test_resolve_ignores_production_only_options_in_development():
    config = _resolver().resolve(_full_flags(install_hrms="yes", ssl="yes", email="ops@example.com"))

    assert config.install_hrms is False
    assert config.ssl is False


def test_resolve_rejects_ssl_without_email_in_development():
    with pytest.raises(ConfigurationError, match="email"):
        _resolver().resolve(_full_flags(prod="no", ssl="yes", email=None))


def test_resolve_prompts_for_ssl_email_in_development():
    prompter = ScriptedPrompter(text=["ops@example.com"])

    config = _resolver(prompter).resolve(_full_flags(prod="no", ssl="yes", assume_yes=False))

    assert config.ssl is False
    assert config.email == "ops@example.com"
    assert prompter.calls == [("text", "Enter email for Let's Encrypt")]


def test_install_config_repr_hides_passwords():
    config = _resolver().resolve(_full_flags())

    assert "dbpass" not in repr(config)
    assert "adminpass" not in repr(config)
