import pytest
import yaml

from docwire.bootstrap import deps
from docwire.bootstrap.config.loader import get_configfile
from docwire.bootstrap.config.settings import BackendName, DocwireSettings
from docwire.core.models.record import ContentKind


@pytest.mark.ut
def test_defaults(clean_config):
    settings = DocwireSettings()

    assert settings.backend is BackendName.msgpack_map
    assert settings.content_kind is ContentKind.text
    assert settings.strict_trailing is True
    assert settings.max_buffer_size == 64 * 1024 * 1024
    assert settings.log_level == "INFO"


@pytest.mark.ut
def test_environment_overrides(clean_config, monkeypatch):
    monkeypatch.setenv("DOCWIRE_BACKEND", "tagged")
    monkeypatch.setenv("DOCWIRE_CONTENT_KIND", "binary")
    monkeypatch.setenv("DOCWIRE_STRICT_TRAILING", "false")

    settings = DocwireSettings()

    assert settings.backend is BackendName.tagged
    assert settings.content_kind is ContentKind.binary
    assert settings.strict_trailing is False


@pytest.mark.ut
def test_yaml_file(clean_config, monkeypatch, tmp_path):
    file = tmp_path / "docwire.yaml"
    file.write_text(yaml.dump({"backend": "envelope", "max_buffer_size": 4096}))
    monkeypatch.setenv("DOCWIRE_CONFIG", str(file))

    settings = DocwireSettings()

    assert get_configfile() == file
    assert settings.backend is BackendName.envelope
    assert settings.max_buffer_size == 4096


@pytest.mark.ut
def test_environment_wins_over_yaml(clean_config, monkeypatch, tmp_path):
    file = tmp_path / "docwire.yaml"
    file.write_text(yaml.dump({"backend": "envelope"}))
    monkeypatch.setenv("DOCWIRE_CONFIG", str(file))
    monkeypatch.setenv("DOCWIRE_BACKEND", "msgpack_array")

    assert DocwireSettings().backend is BackendName.msgpack_array


@pytest.mark.ut
def test_missing_config_file(clean_config, monkeypatch, tmp_path):
    monkeypatch.setenv("DOCWIRE_CONFIG", str(tmp_path / "nope.yaml"))

    with pytest.raises(SystemExit) as exc:
        get_configfile()

    assert "Configuration file not found" in str(exc.value)


@pytest.mark.ut
def test_invalid_settings_exit(clean_config, monkeypatch):
    monkeypatch.setenv("DOCWIRE_BACKEND", "json")

    with pytest.raises(SystemExit) as exc:
        deps.get_settings()

    assert "backend" in str(exc.value)
