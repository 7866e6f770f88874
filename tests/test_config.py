from gatepage.config import INSECURE_DEFAULT_SECRET, Settings
from gatepage.permissions import cookie_settings


def test_defaults_from_empty_env():
    s = Settings.from_env({})
    assert s.port == 3000
    assert s.database_url == "yaml://data/users.yml"
    assert s.secret_key == INSECURE_DEFAULT_SECRET
    assert s.uses_default_secret
    assert s.session_ttl_seconds == 3600
    assert s.cookie_secure is False
    assert s.log_file is None


def test_prefixed_names_win_over_plain_ones():
    s = Settings.from_env(
        {
            "PORT": "8080",
            "GATEPAGE_PORT": "9000",
            "SECRET_KEY": "plain",
            "GATEPAGE_SECRET_KEY": "prefixed",
            "DATABASE_URL": "memory://",
        }
    )
    assert s.port == 9000
    assert s.secret_key == "prefixed"
    assert not s.uses_default_secret
    assert s.database_url == "memory://"


def test_flags_and_numbers():
    s = Settings.from_env(
        {
            "GATEPAGE_COOKIE_SECURE": "Yes",
            "GATEPAGE_HASH_TIME_COST": "5",
            "GATEPAGE_SESSION_TTL": "60",
            "LOG_LEVEL": "debug",
            "GATEPAGE_RELOAD": "1",
        }
    )
    assert s.cookie_secure is True
    assert s.hash_time_cost == 5
    assert s.session_ttl_seconds == 60
    assert s.log_level == "DEBUG"
    assert s.reload is True


def test_blank_values_fall_back_to_defaults():
    s = Settings.from_env({"GATEPAGE_SECRET_KEY": "  ", "PORT": ""})
    assert s.uses_default_secret
    assert s.port == 3000


def test_cookie_settings_follow_settings():
    opts = cookie_settings(Settings(cookie_secure=True, session_ttl_seconds=120))
    assert opts == {"httponly": True, "samesite": "lax", "secure": True, "max_age": 120}
