from pathlib import Path

import pytest
import yaml

from gatepage.auth.users import MemoryUserStore, User, YamlUserStore, open_store
from gatepage.errors import UnexpectedStoreError

ADA = User(name="Ada", email="ada@x.com", password_hash="$argon2id$fake")


def test_memory_store_find_and_insert():
    s = MemoryUserStore()
    assert s.find_by_email("ada@x.com") is None
    s.insert(ADA)
    assert s.find_by_email("ada@x.com") == ADA
    assert s.find_by_email("ADA@x.com") is None


def test_yaml_store_missing_file_is_empty(tmp_path: Path):
    s = YamlUserStore(tmp_path / "data" / "users.yml")
    assert s.find_by_email("ada@x.com") is None


def test_yaml_store_persists_documents(tmp_path: Path):
    path = tmp_path / "data" / "users.yml"
    YamlUserStore(path).insert(ADA)

    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert raw["users"] == [{"name": "Ada", "email": "ada@x.com", "password_hash": "$argon2id$fake"}]

    # A fresh store (another process) sees the same record.
    assert YamlUserStore(path).find_by_email("ada@x.com") == ADA


def test_yaml_store_does_not_enforce_unique_email(tmp_path: Path):
    s = YamlUserStore(tmp_path / "users.yml")
    s.insert(ADA)
    s.insert(User(name="Ada 2", email="ada@x.com", password_hash="$argon2id$other"))
    raw = yaml.safe_load((tmp_path / "users.yml").read_text(encoding="utf-8"))
    assert len(raw["users"]) == 2
    # The first document wins on lookup.
    assert s.find_by_email("ada@x.com").name == "Ada"


def test_yaml_store_skips_broken_documents(tmp_path: Path):
    path = tmp_path / "users.yml"
    path.write_text(
        "users:\n  - just-a-string\n  - {name: NoEmail}\n  - {name: Bob, email: bob@x.com, password_hash: h}\n",
        encoding="utf-8",
    )
    s = YamlUserStore(path)
    assert s.find_by_email("bob@x.com") == User(name="Bob", email="bob@x.com", password_hash="h")


def test_yaml_store_wraps_parse_errors(tmp_path: Path):
    path = tmp_path / "users.yml"
    path.write_text("users: [unclosed\n", encoding="utf-8")
    with pytest.raises(UnexpectedStoreError):
        YamlUserStore(path).find_by_email("ada@x.com")


@pytest.mark.parametrize(
    "url, kind",
    [
        ("memory://", MemoryUserStore),
        ("yaml://data/users.yml", YamlUserStore),
        ("yaml:///tmp/users.yml", YamlUserStore),
        ("users.yaml", YamlUserStore),
    ],
)
def test_open_store(url, kind):
    assert isinstance(open_store(url), kind)


def test_open_store_absolute_yaml_path():
    assert open_store("yaml:///tmp/users.yml").path == Path("/tmp/users.yml").resolve()


@pytest.mark.parametrize("url", ["", "yaml://", "mongodb://localhost/app", "users.json"])
def test_open_store_rejects_unknown(url):
    with pytest.raises(ValueError):
        open_store(url)
