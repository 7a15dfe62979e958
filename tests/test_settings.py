import pytest

from commitscrape.settings import Settings


@pytest.fixture(autouse=True)
def isolated_workdir(tmp_path, monkeypatch):
    """Run each test where no `.env` or `config.toml` exists yet."""

    monkeypatch.chdir(tmp_path)
    for name in ("PORT", "USERNAME", "EXPIRE", "ALLOWED_USERS", "ALLOWED_ORIGINS"):
        monkeypatch.delenv(f"COMMITSCRAPE_{name}", raising=False)
    return tmp_path


def test_settings_defaults_without_config_file() -> None:
    settings = Settings()

    assert settings.port == 7800
    assert settings.username == "mn6"
    assert settings.allowed_origins == ["*"]
    assert settings.expire == 43200
    assert settings.allowed_users == "|xaanit|mn6|"
    assert settings.fetch_timeout_seconds == 10.0


def test_settings_reads_config_toml(isolated_workdir) -> None:
    (isolated_workdir / "config.toml").write_text(
        'port = 9000\nusername = "octocat"\nallowed_origins = ["https://example.com"]\n'
        'expire = 60\nallowed_users = "|octocat|hubot|"\n'
    )

    settings = Settings()

    assert settings.port == 9000
    assert settings.username == "octocat"
    assert settings.allowed_origins == ["https://example.com"]
    assert settings.expire == 60
    assert settings.allowed_users == "|octocat|hubot|"


def test_environment_overrides_config_toml(isolated_workdir, monkeypatch) -> None:
    (isolated_workdir / "config.toml").write_text('username = "octocat"\n')
    monkeypatch.setenv("COMMITSCRAPE_USERNAME", "hubot")

    assert Settings().username == "hubot"


@pytest.mark.parametrize(
    ("username", "allowed"),
    [("a", True), ("b", True), ("c", False), ("a|b", False), ("", False), ("|a|", False)],
)
def test_is_user_allowed_checks_pipe_delimited_membership(
    username: str, allowed: bool
) -> None:
    assert Settings(allowed_users="|a|b|").is_user_allowed(username) is allowed
