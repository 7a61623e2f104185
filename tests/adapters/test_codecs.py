"""Structured codec behaviour beyond the port contract."""

from __future__ import annotations

import pytest

from lib_config_locator.adapters.codecs import structured as structured_module
from lib_config_locator.adapters.codecs.structured import JSONCodec, TOMLCodec, YAMLCodec, default_codecs
from lib_config_locator.domain.formats import FileFormat

requires_yaml = pytest.mark.skipif(structured_module.yaml is None, reason="PyYAML not installed")


def test_default_codecs_follow_priority_order() -> None:
    assert list(default_codecs()) == list(FileFormat)


def test_toml_rejects_top_level_array() -> None:
    with pytest.raises(TypeError):
        TOMLCodec().dumps([1, 2, 3])


def test_toml_drops_none_entries_recursively() -> None:
    text = TOMLCodec().dumps({"a": 1, "b": None, "nested": {"c": None, "d": "x"}})
    assert TOMLCodec().loads(text) == {"a": 1, "nested": {"d": "x"}}


def test_toml_invalid_text_raises_value_error() -> None:
    with pytest.raises(ValueError):
        TOMLCodec().loads("= broken")


def test_json_output_is_indented_and_unicode() -> None:
    assert JSONCodec().dumps({"name": "Grüße"}) == '{\n  "name": "Grüße"\n}\n'


def test_json_errors_are_value_errors() -> None:
    with pytest.raises(JSONCodec().errors):
        JSONCodec().loads("{broken")


@requires_yaml
def test_yaml_keeps_key_order() -> None:
    text = YAMLCodec().dumps({"zeta": 1, "alpha": 2})
    assert text.index("zeta") < text.index("alpha")


@requires_yaml
def test_yaml_errors_include_yaml_error() -> None:
    codec = YAMLCodec()
    with pytest.raises(codec.errors):
        codec.loads("key: [unclosed")


@requires_yaml
def test_yaml_empty_document_is_none() -> None:
    assert YAMLCodec().loads("") is None
