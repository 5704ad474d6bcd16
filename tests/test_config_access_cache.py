from gatewayplay.config import access
from gatewayplay.config.schema import Config


def _counting_loader(monkeypatch):
    loads = []

    def _load(path=None):
        loads.append(path)
        return Config()

    monkeypatch.setattr(access, "load_config", _load)
    access.clear_config_cache()
    return loads


def test_same_file_and_env_is_loaded_once(monkeypatch, tmp_path):
    loads = _counting_loader(monkeypatch)
    path = tmp_path / "config.json"

    first = access.get_config(config_path=path)
    second = access.get_config(config_path=path)
    third = access.get_config(config_path=path, force_reload=True)

    assert first is second
    assert third is not second
    assert loads == [path.resolve(), path.resolve()]


def test_changed_env_override_reloads(monkeypatch, tmp_path):
    path = tmp_path / "config.json"
    monkeypatch.delenv("GATEWAYPLAY_GATEWAY__UPSTREAM_PORT", raising=False)
    access.clear_config_cache()

    before = access.get_config(config_path=path)
    monkeypatch.setenv("GATEWAYPLAY_GATEWAY__UPSTREAM_PORT", "6061")
    after = access.get_config(config_path=path)

    assert before.gateway.upstream_port == 8080
    assert after.gateway.upstream_port == 6061
    assert access.config_cache_key(path)[1] == (("GATEWAYPLAY_GATEWAY__UPSTREAM_PORT", "6061"),)


def test_unrelated_env_does_not_affect_key(monkeypatch, tmp_path):
    path = tmp_path / "config.json"
    key = access.config_cache_key(path)
    monkeypatch.setenv("SOMETHING_ELSE", "1")
    assert access.config_cache_key(path) == key


def test_clear_single_path_drops_every_env_variant(monkeypatch, tmp_path):
    loads = _counting_loader(monkeypatch)
    path = tmp_path / "config.json"
    other = tmp_path / "other.json"

    access.get_config(config_path=path)
    monkeypatch.setenv("GATEWAYPLAY_INVOKER__SCHEME", "http")
    access.get_config(config_path=path)
    access.get_config(config_path=other)
    access.clear_config_cache(config_path=path)
    access.get_config(config_path=path)
    access.get_config(config_path=other)

    assert loads.count(path.resolve()) == 3
    assert loads.count(other.resolve()) == 1
