import pytest

from gxclient.core import auth
from gxclient.core.config import load_settings
from gxclient.core.errors import AuthError

ENV_KEYS = (
    "GXCLIENT_SERVER",
    "GXCLIENT_USER",
    "GXCLIENT_PASSWORD",
    "GXCLIENT_POLL_INTERVAL",
    "GXCLIENT_TIMEOUT",
    "GXCLIENT_REQUEST_TIMEOUT",
    "GXCLIENT_VERBOSE",
)


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    path = tmp_path / "gxclientcfg"
    monkeypatch.setenv("GXCLIENT_CONFIG_FILE", str(path))
    return path


def test_defaults_without_file(config_file):
    settings = load_settings()

    assert settings.server == ""
    assert settings.poll_interval == 1.0
    assert settings.timeout is None
    assert settings.verbose is False
    assert settings.validate()


def test_profile_section_overrides_default(config_file):
    config_file.write_text(
        "[DEFAULT]\n"
        "server = https://platform.example/bioumlweb\n"
        "poll_interval = 2\n"
        "\n"
        "[work]\n"
        "user = me@example.com\n"
        "password = secret\n"
        "timeout = 600\n"
    )

    default = load_settings()
    work = load_settings("work")

    assert default.user == ""
    assert work.server == "https://platform.example/bioumlweb"
    assert work.user == "me@example.com"
    assert work.poll_interval == 2.0
    assert work.timeout == 600.0
    assert work.validate() == []


def test_environment_wins_over_file(config_file, monkeypatch):
    config_file.write_text("[DEFAULT]\nserver = https://file.example\n")
    monkeypatch.setenv("GXCLIENT_SERVER", "https://env.example")
    monkeypatch.setenv("GXCLIENT_VERBOSE", "yes")

    settings = load_settings()

    assert settings.server == "https://env.example"
    assert settings.verbose is True


def test_invalid_numbers_fall_back(config_file, monkeypatch):
    monkeypatch.setenv("GXCLIENT_POLL_INTERVAL", "soon")
    monkeypatch.setenv("GXCLIENT_TIMEOUT", "-5")

    settings = load_settings()

    assert settings.poll_interval == 1.0
    assert settings.timeout is None


def test_user_without_password_is_invalid(config_file, monkeypatch):
    monkeypatch.setenv("GXCLIENT_SERVER", "https://env.example")
    monkeypatch.setenv("GXCLIENT_USER", "me")

    assert any("Password" in e for e in load_settings().validate())


def test_get_client_reports_config_errors(config_file):
    with pytest.raises(AuthError, match="default profile"):
        auth.get_client()


def test_get_client_builds_anonymous_client(config_file, monkeypatch):
    monkeypatch.setenv("GXCLIENT_SERVER", "https://env.example/biouml/")
    monkeypatch.setenv("GXCLIENT_POLL_INTERVAL", "3")

    client = auth.get_client(verbose=True)

    assert client.connection.server == "https://env.example/biouml"
    assert client.poll_interval == 3.0
    assert client.verbose is True
    client.connection.close()
