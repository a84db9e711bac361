from pathlib import Path

import pytest

from filecache.infrastructure.config import settings


@pytest.fixture
def fresh_config(monkeypatch, tmp_path: Path):
    """Lets load_configuration actually read sources from a temp directory."""
    monkeypatch.setattr(settings, "_loaded", False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_env_var_name():
    assert settings.env_var_name("cache.root_path") == "FILECACHE_CACHE_ROOT_PATH"


def test_defaults():
    assert settings.get_cache_root() == settings.DEFAULT_CACHE_ROOT
    assert settings.get_instance_name() == "default"
    assert settings.get_default_ttl() == 0


def test_yaml_config_is_flattened(fresh_config: Path):
    config_file = fresh_config / "config.yaml"
    config_file.write_text("cache:\n  instance: from-yaml\n  default_ttl: 120\nlogging:\n  level: debug\n")

    settings.load_configuration(config_file=config_file)

    assert settings.get_instance_name() == "from-yaml"
    assert settings.get_default_ttl() == 120
    assert settings.get_config("logging.level") == "debug"


def test_invalid_yaml_is_ignored(fresh_config: Path):
    config_file = fresh_config / "config.yaml"
    config_file.write_text("cache: [unclosed\n")

    settings.load_configuration(config_file=config_file)

    assert settings.get_instance_name() == "default"


def test_environment_overrides_yaml(fresh_config: Path, monkeypatch):
    config_file = fresh_config / "config.yaml"
    config_file.write_text("cache:\n  instance: from-yaml\n")
    monkeypatch.setenv("FILECACHE_CACHE_INSTANCE", "from-env")

    settings.load_configuration(config_file=config_file)

    assert settings.get_instance_name() == "from-env"


def test_dotenv_file_is_loaded_without_overriding_environment(fresh_config: Path, monkeypatch):
    (fresh_config / ".env").write_text("FILECACHE_CACHE_INSTANCE=from-dotenv\nFILECACHE_CACHE_DEFAULT_TTL=30\n")
    monkeypatch.setenv("FILECACHE_CACHE_DEFAULT_TTL", "45")
    # load_dotenv writes into os.environ; register the key so monkeypatch restores it
    monkeypatch.setenv("FILECACHE_CACHE_INSTANCE", "placeholder")
    monkeypatch.delenv("FILECACHE_CACHE_INSTANCE")

    settings.load_configuration(config_file=fresh_config / "missing.yaml")

    assert settings.get_instance_name() == "from-dotenv"
    assert settings.get_default_ttl() == 45


def test_env_values_are_coerced(monkeypatch):
    monkeypatch.setenv("FILECACHE_SOME_FLAG", "true")
    monkeypatch.setenv("FILECACHE_SOME_RATIO", "0.5")
    monkeypatch.setenv("FILECACHE_SOME_NAME", "plain")

    assert settings.get_config("some.flag") is True
    assert settings.get_config("some.ratio") == 0.5
    assert settings.get_config("some.name") == "plain"


def test_test_config_has_highest_priority(monkeypatch):
    monkeypatch.setenv("FILECACHE_CACHE_INSTANCE", "from-env")
    settings.set_config_for_testing({"cache.instance": "from-test"})

    assert settings.get_instance_name() == "from-test"

    settings.clear_test_config()
    assert settings.get_instance_name() == "from-env"


def test_cache_root_expands_user(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("HOME", str(tmp_path))
    settings.set_config("cache.root_path", "~/my-cache")

    assert settings.get_cache_root() == tmp_path / "my-cache"


@pytest.mark.parametrize("raw", ["abc", -5])
def test_invalid_default_ttl_falls_back_to_zero(raw):
    settings.set_config("cache.default_ttl", raw)

    assert settings.get_default_ttl() == 0
