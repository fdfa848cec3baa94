"""Versioned answers models: discriminator and parsing."""

import pytest

from intake_core.models import (
    FormState,
    IntakeAnswersV1,
    IntakeAnswersV2,
    is_v2,
    parse_answers,
)


class TestIsV2:

    def test_tagged_mapping(self):
        assert is_v2({"v": 2})

    @pytest.mark.parametrize("version", ["2", 2.0, True, 1, None])
    def test_only_integer_two_counts(self, version):
        assert not is_v2({"v": version})

    def test_missing_marker(self, legacy_records):
        assert not is_v2(legacy_records["marketplace"])

    def test_models(self):
        assert is_v2(IntakeAnswersV2())
        assert not is_v2(IntakeAnswersV1())

    @pytest.mark.parametrize("value", [None, "v2", 2, [2]])
    def test_non_records(self, value):
        assert not is_v2(value)

    def test_field_presence_is_ignored(self):
        """Sections without the marker do not make a record V2."""
        assert not is_v2({"identity": {"q0_project_name": "X"}, "business": {}})


class TestParseAnswers:

    def test_parses_current_shape(self):
        parsed = parse_answers({
            "v": 2,
            "identity": {"q0_project_name": "Budget Tracker"},
            "business": {"q2_target": "freelancers"},
        })
        assert isinstance(parsed, IntakeAnswersV2)
        assert parsed.identity.q0_project_name == "Budget Tracker"
        assert parsed.tech.q17_integrations == []

    def test_parses_legacy_shape(self, legacy_records):
        parsed = parse_answers(legacy_records["marketplace"])
        assert isinstance(parsed, IntakeAnswersV1)
        assert parsed.q2_audience == ["individuals", "students"]

    def test_string_marker_is_legacy(self):
        assert isinstance(parse_answers({"v": "2"}), IntakeAnswersV1)

    def test_nulls_fall_back_to_defaults(self, legacy_records):
        parsed = parse_answers(legacy_records["brochure"])
        assert parsed.q11_automation == []
        assert parsed.q7_after_action == ""

    def test_null_sections_fall_back_to_defaults(self):
        parsed = parse_answers({
            "v": 2,
            "identity": {"q0_project_name": "Budget Tracker"},
            "tech": None,
            "design": None,
        })
        assert isinstance(parsed, IntakeAnswersV2)
        assert parsed.tech.q15_store_what == []
        assert parsed.design.q20_style == ""

    def test_dump_keeps_marker(self):
        assert IntakeAnswersV2().model_dump(mode="json")["v"] == 2


class TestFormState:

    def test_project_name_alias(self):
        state = FormState.model_validate({"projectName": "Budget Tracker"})
        assert state.project_name == "Budget Tracker"
        assert state.model_dump(by_alias=True)["projectName"] == "Budget Tracker"

    def test_field_name_also_accepted(self):
        assert FormState(project_name="X").project_name == "X"

    def test_defaults(self):
        state = FormState()
        assert state.q2_target == ""
        assert state.q13_return_items == []
