import pytest

from cliniscan.config import DEFAULT_CONFIG, EngineConfig, load_config
from cliniscan.core.errors import ConfigError


def write_config(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_defaults_without_file():
    config = load_config(None)

    assert config["output_dir"] == "runs"
    assert config["observers"] == []
    assert isinstance(config["engine_config"], EngineConfig)
    assert config["engine_config"].max_file_size == "50MB"


def test_user_values_merge_with_defaults(tmp_path):
    path = write_config(
        tmp_path,
        "engine:\n"
        "  max_file_size: 1MB\n"
        "  preview_limit: 5\n"
        "automation:\n"
        "  cooldown_seconds: 1\n"
        "output_dir: out\n",
    )
    config = load_config(path)

    assert config["engine_config"].max_file_size == "1MB"
    assert config["engine_config"].preview_limit == 5
    assert config["engine_config"].validation_level == "strict"
    assert config["automation"] == {"cooldown_seconds": 1, "settle_seconds": 2}
    assert config["output_dir"] == "out"


def test_camel_case_engine_keys_are_accepted(tmp_path):
    path = write_config(tmp_path, "engine:\n  maxFileSize: 10KB\n")
    assert load_config(path)["engine_config"].max_file_size == "10KB"


def test_defaults_are_not_mutated(tmp_path):
    load_config(write_config(tmp_path, "automation:\n  cooldown_seconds: 99\n"))
    assert DEFAULT_CONFIG["automation"]["cooldown_seconds"] == 10


def test_empty_file_uses_defaults(tmp_path):
    config = load_config(write_config(tmp_path, ""))
    assert config["engine_config"] == EngineConfig()


def test_unknown_engine_key_rejected(tmp_path):
    with pytest.raises(ConfigError):
        load_config(write_config(tmp_path, "engine:\n  turbo: true\n"))


def test_non_mapping_file_rejected(tmp_path):
    with pytest.raises(ValueError):
        load_config(write_config(tmp_path, "- a\n- b\n"))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


def test_engine_config_to_dict():
    assert EngineConfig().to_dict() == {
        "maxFileSize": "50MB",
        "validationLevel": "strict",
        "previewLimit": 50,
        "supportedFormats": ["csv", "json", "hl7", "html"],
    }
