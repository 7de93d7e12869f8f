"""Tests for configuration loading."""

import comfywire.config as config_module
from comfywire.config import get_config, load_config


def test_defaults_without_file() -> None:
    config = load_config()
    assert config.validation.check_output_arity is True
    assert config.validation.payload_preview_chars == 2000
    assert config.logging.level == "WARNING"


def test_load_config_from_env(tmp_path, monkeypatch):
    config_path = tmp_path / "comfywire.yaml"
    config_path.write_text(
        """
validation:
  check_output_arity: false
  payload_preview_chars: 80
logging:
  level: DEBUG
"""
    )
    monkeypatch.setenv("COMFYWIRE_CONFIG", str(config_path))

    config = load_config()
    assert config.validation.check_output_arity is False
    assert config.validation.payload_preview_chars == 80
    assert config.logging.level == "DEBUG"


def test_explicit_path_wins(tmp_path) -> None:
    config_path = tmp_path / "other.yaml"
    config_path.write_text("logging:\n  level: INFO\n")
    assert load_config(str(config_path)).logging.level == "INFO"


def test_env_overrides(monkeypatch) -> None:
    monkeypatch.setenv("COMFYWIRE_LOG_LEVEL", "debug")
    monkeypatch.setenv("COMFYWIRE_CHECK_OUTPUT_ARITY", "off")

    config = load_config()
    assert config.logging.level == "DEBUG"
    assert config.validation.check_output_arity is False


def test_get_config_is_cached(monkeypatch) -> None:
    monkeypatch.setattr(config_module, "_config_instance", None)
    first = get_config()
    assert get_config() is first


def test_preview_length_applies_to_diagnostics(make_node_def) -> None:
    from comfywire.config import ComfywireConfig, ValidationConfig
    from comfywire.validation import validate_node_def

    config = ComfywireConfig(validation=ValidationConfig(payload_preview_chars=10))
    errors = []
    validate_node_def(make_node_def(output_node="no"), on_error=errors.append, config=config)
    first_line = errors[0].splitlines()[0]
    assert first_line.endswith("...")
    assert len(first_line) == len("Invalid NodeDef: ") + 10 + 3
