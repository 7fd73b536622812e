"""Tests for configdiff.metadata models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from configdiff.metadata import (
    DEFAULT_TYPE,
    Deprecation,
    MetadataGroup,
    MetadataHint,
    MetadataProperty,
    MetadataSnapshot,
    ValueHint,
    ValueProvider,
    extract_short_description,
)


# ---------------------------------------------------------------------------
# extract_short_description
# ---------------------------------------------------------------------------


class TestExtractShortDescription:
    def test_first_sentence(self) -> None:
        assert extract_short_description("My short description. More stuff.") == "My short description."

    def test_new_line_before_dot(self) -> None:
        assert (
            extract_short_description("My short\ndescription.\nMore stuff.")
            == "My short description."
        )

    def test_new_line_before_dot_with_spaces(self) -> None:
        assert (
            extract_short_description("My short  \n description.  \nMore stuff.")
            == "My short description."
        )

    def test_no_dot(self) -> None:
        assert extract_short_description("My short description") == "My short description"

    def test_no_dot_multiple_lines(self) -> None:
        assert extract_short_description("My short description  \n More stuff") == "My short description"

    def test_none(self) -> None:
        assert extract_short_description(None) is None

    def test_empty(self) -> None:
        assert extract_short_description("") == ""

    def test_dot_inside_word_is_not_a_boundary(self) -> None:
        text = "Uses java.lang.String values. Second sentence."
        assert extract_short_description(text) == "Uses java.lang.String values."

    def test_dot_at_end(self) -> None:
        assert extract_short_description("Single sentence.") == "Single sentence."

    def test_crlf(self) -> None:
        assert extract_short_description("Line one\r\nline two. Rest.") == "Line one line two."


# ---------------------------------------------------------------------------
# MetadataProperty defaults
# ---------------------------------------------------------------------------


class TestPropertyDefaults:
    def test_name_from_last_segment(self) -> None:
        prop = MetadataProperty(id="spring.foo.name")
        assert prop.name == "name"

    def test_name_without_dot(self) -> None:
        prop = MetadataProperty(id="debug")
        assert prop.name == "debug"

    def test_explicit_name_kept(self) -> None:
        prop = MetadataProperty(id="spring.foo.name", name="Foo name")
        assert prop.name == "Foo name"

    def test_type_defaults_to_string(self) -> None:
        assert MetadataProperty(id="a.b").type == DEFAULT_TYPE

    def test_null_type_defaults_to_string(self) -> None:
        prop = MetadataProperty.model_validate({"id": "a.b", "type": None})
        assert prop.type == DEFAULT_TYPE

    def test_optional_fields_absent(self) -> None:
        prop = MetadataProperty(id="a.b")
        assert prop.description is None
        assert prop.short_description is None
        assert prop.source_type is None
        assert prop.source_method is None
        assert prop.default_value is None
        assert prop.deprecation is None
        assert not prop.is_deprecated

    def test_json_aliases(self) -> None:
        prop = MetadataProperty.model_validate(
            {"id": "a.b", "sourceType": "org.acme.A", "sourceMethod": "a()", "defaultValue": [1, 2]}
        )
        assert prop.source_type == "org.acme.A"
        assert prop.source_method == "a()"
        assert prop.default_value == [1, 2]

    def test_legacy_deprecated_flag(self) -> None:
        prop = MetadataProperty.model_validate({"id": "a.b", "deprecated": True})
        assert prop.deprecation == Deprecation()
        assert prop.is_deprecated

    def test_deprecation_object_wins_over_flag(self) -> None:
        prop = MetadataProperty.model_validate(
            {"id": "a.b", "deprecated": True, "deprecation": {"level": "error"}}
        )
        assert prop.deprecation is not None
        assert prop.deprecation.level == "error"

    def test_unknown_fields_ignored(self) -> None:
        prop = MetadataProperty.model_validate({"id": "a.b", "whatever": {"nested": 1}})
        assert not hasattr(prop, "whatever")

    def test_frozen(self) -> None:
        prop = MetadataProperty(id="a.b")
        with pytest.raises(ValidationError):
            prop.type = "java.lang.Integer"  # type: ignore[misc]


class TestPropertyValidation:
    def test_missing_id(self) -> None:
        with pytest.raises(ValidationError):
            MetadataProperty.model_validate({"type": "java.lang.String"})

    def test_id_not_a_string(self) -> None:
        with pytest.raises(ValidationError):
            MetadataProperty.model_validate({"id": 42})

    def test_empty_id(self) -> None:
        with pytest.raises(ValidationError):
            MetadataProperty.model_validate({"id": ""})

    def test_description_not_a_string(self) -> None:
        with pytest.raises(ValidationError):
            MetadataProperty.model_validate({"id": "a.b", "description": ["x"]})

    def test_unknown_deprecation_level(self) -> None:
        with pytest.raises(ValidationError):
            MetadataProperty.model_validate({"id": "a.b", "deprecation": {"level": "fatal"}})


class TestDeprecation:
    def test_level_defaults_to_warning(self) -> None:
        assert Deprecation().level == "warning"

    def test_null_level(self) -> None:
        assert Deprecation.model_validate({"level": None}).level == "warning"

    def test_value_equality(self) -> None:
        assert Deprecation(replacement="a.b") == Deprecation(replacement="a.b")
        assert Deprecation(replacement="a.b") != Deprecation(replacement="a.c")


# ---------------------------------------------------------------------------
# Groups and hints
# ---------------------------------------------------------------------------


class TestGroup:
    def test_short_description(self) -> None:
        group = MetadataGroup(id="spring.foo", description="This is Foo. It has properties.")
        assert group.short_description == "This is Foo."

    def test_type_optional(self) -> None:
        assert MetadataGroup(id="spring.foo").type is None


class TestHints:
    def test_value_hint_short_description(self) -> None:
        hint = ValueHint(value=42, description="The answer. \nReally.")
        assert hint.short_description == "The answer."

    def test_value_hint_without_description(self) -> None:
        assert ValueHint(value="one").short_description is None

    def test_value_hint_structured_value(self) -> None:
        hint = ValueHint.model_validate({"value": {"a": [1, True, None]}})
        assert hint.value == {"a": [1, True, None]}

    def test_provider_parameters_default_empty(self) -> None:
        assert ValueProvider(name="any").parameters == {}
        assert ValueProvider.model_validate({"name": "any", "parameters": None}).parameters == {}

    def test_hint_json_keys(self) -> None:
        hint = MetadataHint.model_validate(
            {
                "id": "spring.foo.mode",
                "values": [{"value": "on"}],
                "providers": [{"name": "any"}],
            }
        )
        assert [v.value for v in hint.value_hints] == ["on"]
        assert [p.name for p in hint.value_providers] == ["any"]

    def test_hint_long_keys(self) -> None:
        hint = MetadataHint.model_validate(
            {"id": "spring.foo.mode", "valueHints": [{"value": 1}], "valueProviders": []}
        )
        assert len(hint.value_hints) == 1
        assert hint.value_providers == ()


class TestSnapshot:
    def test_hints_for_property_and_map_keys(self) -> None:
        snapshot = MetadataSnapshot(
            properties={"spring.map": MetadataProperty(id="spring.map")},
            hints=(
                MetadataHint(id="spring.map"),
                MetadataHint(id="spring.map.keys"),
                MetadataHint(id="spring.mapping"),
            ),
        )
        assert [h.id for h in snapshot.hints_for("spring.map")] == ["spring.map", "spring.map.keys"]

    def test_deprecated_properties(self) -> None:
        snapshot = MetadataSnapshot(
            properties={
                "a.b": MetadataProperty(id="a.b"),
                "a.c": MetadataProperty(id="a.c", deprecation=Deprecation()),
            }
        )
        assert [p.id for p in snapshot.deprecated_properties()] == ["a.c"]

    def test_mismatched_key_rejected(self) -> None:
        with pytest.raises(ValidationError):
            MetadataSnapshot(properties={"a.b": MetadataProperty(id="a.c")})
