"""
Unit tests for the head-cover evaluator.
"""
import copy

import pytest

from heimdall.exceptions import InvalidInputError
from heimdall.violations.event_schema import DetectionResult, EvaluationOutcome
from heimdall.violations.rules import check_person, evaluate


def person(pid, *parts):
    return {"id": pid, "bodyParts": list(parts)}


def part(name, *equipment):
    return {"name": name, "equipmentDetections": [{"type": t, "confidence": 90.0} for t in equipment]}


def head(*equipment):
    return part("HEAD", *equipment)


class TestScenarios:
    def test_no_persons(self):
        outcome = evaluate({"persons": []})
        assert outcome.violation_detected is False
        assert outcome.person_found is False
        assert outcome.details == ["No Worker Detected"]

    def test_one_person_with_helmet(self):
        outcome = evaluate({"persons": [person(1, head("HEAD_COVER"))]})
        assert outcome.violation_detected is False
        assert outcome.person_found is True
        assert outcome.details == []

    def test_one_person_without_helmet(self):
        outcome = evaluate({"persons": [person(1, head())]})
        assert outcome.violation_detected is True
        assert outcome.person_found is True
        assert outcome.details == ["Person ID 1: No Helmet"]

    def test_one_person_without_head(self):
        outcome = evaluate({"persons": [person(1, part("LEFT_HAND", "HAND_COVER"))]})
        assert outcome.violation_detected is True
        assert outcome.person_found is True
        assert outcome.details == ["Person ID 1: Head Obscured"]

    def test_one_compliant_one_violating(self):
        outcome = evaluate({"persons": [
            person(1, head("HEAD_COVER")),
            person(2, head()),
        ]})
        assert outcome.violation_detected is True
        assert outcome.person_found is True
        assert outcome.details == ["Person ID 2: No Helmet"]


class TestPolicy:
    def test_person_with_no_body_parts_is_head_obscured(self):
        outcome = evaluate({"persons": [person(5)]})
        assert outcome.details == ["Person ID 5: Head Obscured"]
        assert outcome.violation_detected is True

    def test_all_violators_reported_in_person_order(self):
        outcome = evaluate({"persons": [
            person(3, head("FACE_COVER")),
            person(1, head("HEAD_COVER")),
            person(2, part("FACE")),
            person(4, head()),
        ]})
        assert outcome.details == [
            "Person ID 3: No Helmet",
            "Person ID 2: Head Obscured",
            "Person ID 4: No Helmet",
        ]

    def test_low_confidence_head_cover_still_counts(self):
        data = {"persons": [{
            "id": 1,
            "bodyParts": [{"name": "HEAD", "equipmentDetections": [{"type": "HEAD_COVER", "confidence": 1.0}]}],
        }]}
        assert evaluate(data).violation_detected is False

    def test_head_cover_on_other_body_part_does_not_count(self):
        outcome = evaluate({"persons": [person(1, head(), part("LEFT_HAND", "HEAD_COVER"))]})
        assert outcome.details == ["Person ID 1: No Helmet"]

    def test_extra_parts_and_equipment_are_ignored(self):
        outcome = evaluate({"persons": [person(
            1,
            part("FACE", "FACE_COVER"),
            head("FACE_COVER", "HEAD_COVER"),
            part("RIGHT_HAND", "HAND_COVER"),
        )]})
        assert outcome.details == []
        assert outcome.violation_detected is False

    def test_string_person_id_in_message(self):
        outcome = evaluate({"persons": [person("worker-7", head())]})
        assert outcome.details == ["Person ID worker-7: No Helmet"]

    def test_both_findings_set_the_same_flag(self):
        no_helmet = evaluate({"persons": [person(1, head())]})
        obscured = evaluate({"persons": [person(1)]})
        assert no_helmet.violation_detected == obscured.violation_detected is True
        assert no_helmet.details != obscured.details

    def test_check_person_returns_none_when_compliant(self):
        result = DetectionResult.model_validate({"persons": [person(9, head("HEAD_COVER"))]})
        assert check_person(result.persons[0]) is None


class TestPurity:
    def test_idempotent(self):
        data = {"persons": [person(1, head()), person(2, head("HEAD_COVER"))]}
        result = DetectionResult.model_validate(data)
        assert evaluate(result) == evaluate(result)

    def test_input_not_mutated(self):
        data = {"persons": [person(1, head()), person(2)]}
        snapshot = copy.deepcopy(data)
        evaluate(data)
        assert data == snapshot

    def test_accepts_model_and_mapping(self):
        data = {"persons": [person(1, head())]}
        assert evaluate(data) == evaluate(DetectionResult.model_validate(data))

    def test_outcome_wire_names(self):
        outcome = evaluate({"persons": [person(1, head())]})
        assert outcome.model_dump(by_alias=True) == {
            "violation": True,
            "personFound": True,
            "details": ["Person ID 1: No Helmet"],
        }
        assert isinstance(outcome, EvaluationOutcome)


class TestInvalidInput:
    @pytest.mark.parametrize("data", [
        {},
        {"persons": "not-a-list"},
        {"persons": [{"id": 1}]},
        {"persons": [{"bodyParts": []}]},
        {"persons": [{"id": 1, "bodyParts": [{"name": "HEAD"}]}]},
        {"persons": [{"id": 1, "bodyParts": "HEAD"}]},
    ])
    def test_malformed_mapping(self, data):
        with pytest.raises(InvalidInputError):
            evaluate(data)

    @pytest.mark.parametrize("value", [None, [], "persons", 42])
    def test_wrong_top_level_type(self, value):
        with pytest.raises(InvalidInputError):
            evaluate(value)

    def test_unvalidated_model_with_bad_persons(self):
        with pytest.raises(InvalidInputError):
            evaluate(DetectionResult.model_construct(persons=None))

    def test_missing_fields_are_not_treated_as_empty(self):
        # an empty list is "no detections", a missing key is corrupt data
        assert evaluate({"persons": []}).person_found is False
        with pytest.raises(InvalidInputError):
            evaluate({"people": []})
