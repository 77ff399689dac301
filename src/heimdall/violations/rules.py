"""
rules.py
This module inspects the persons found in one image and decides whether a
safety violation exists.

Input expected by evaluate():
    DetectionResult (or a mapping of the same shape):
        {
            "persons": [
                {
                    "id": 1,
                    "bodyParts": [
                        {
                            "name": "HEAD",
                            "equipmentDetections": [
                                {"type": "HEAD_COVER", "confidence": 98.5}
                            ]
                        }
                    ]
                }
            ]
        }

Returns:
    EvaluationOutcome with violation / personFound / details.

Policy: a person whose HEAD body part was not located is flagged as
"Head Obscured" (fail-closed). Confidence filtering happens in the vision
service, so any HEAD_COVER detection counts as compliant here.
"""

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from ..exceptions import InvalidInputError
from .event_schema import (
    HEAD,
    HEAD_COVER,
    HEAD_OBSCURED_TEMPLATE,
    NO_HELMET_TEMPLATE,
    NO_WORKER_DETECTED,
    DetectionResult,
    EvaluationOutcome,
    Person,
)

logger = logging.getLogger(__name__)


#############
# Utilities #
#############

def _coerce_result(result: Union[DetectionResult, Mapping[str, Any]]) -> DetectionResult:
    if isinstance(result, DetectionResult):
        persons = result.persons
    elif isinstance(result, Mapping):
        try:
            return DetectionResult.model_validate(result)
        except ValidationError as e:
            raise InvalidInputError(f"Malformed detection result: {e}") from e
    else:
        raise InvalidInputError(
            f"Expected a DetectionResult or mapping, got {type(result).__name__}"
        )

    # models built with model_construct() skip validation
    if not isinstance(persons, (list, tuple)):
        raise InvalidInputError("'persons' must be a sequence")
    return result


def _require_sequence(value: Any, what: str) -> None:
    if not isinstance(value, (list, tuple)):
        raise InvalidInputError(f"{what} must be a sequence, got {type(value).__name__}")


##############################
# Violation check functions  #
##############################

def check_person(person: Person) -> Optional[str]:
    """
    Head-cover check for a single person.

    Returns the finding for the details list, or None when compliant:
    - no HEAD body part        -> "Person ID {id}: Head Obscured"
    - HEAD without HEAD_COVER  -> "Person ID {id}: No Helmet"
    """
    if not isinstance(person, Person):
        raise InvalidInputError(f"Expected a Person, got {type(person).__name__}")
    _require_sequence(getattr(person, "body_parts", None), f"Person {person.id} body parts")

    head = person.find_body_part(HEAD)
    if head is None:
        return HEAD_OBSCURED_TEMPLATE.format(person_id=person.id)

    detections = getattr(head, "equipment_detections", None)
    _require_sequence(detections, f"Person {person.id} HEAD equipment detections")

    if any(eq.type == HEAD_COVER for eq in detections):
        return None
    return NO_HELMET_TEMPLATE.format(person_id=person.id)


##############################
# Master evaluation function #
##############################

def evaluate(result: Union[DetectionResult, Mapping[str, Any]]) -> EvaluationOutcome:
    """
    Decide whether the detection result contains a safety violation.

    Every person is checked; one violator does not stop the others from being
    reported. Raises InvalidInputError for structurally broken input.
    """
    result = _coerce_result(result)

    if not result.persons:
        logger.debug("no persons in detection result")
        return EvaluationOutcome(
            violation_detected=False,
            person_found=False,
            details=[NO_WORKER_DETECTED],
        )

    details = []
    for person in result.persons:
        finding = check_person(person)
        if finding is not None:
            details.append(finding)

    logger.debug("evaluated %d person(s), %d finding(s)", len(result.persons), len(details))

    return EvaluationOutcome(
        violation_detected=bool(details),
        person_found=True,
        details=details,
    )
