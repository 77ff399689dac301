"""
violations/adapter.py
Converts between the vision service payload, the internal schema and the
backend response / audit formats.

This adapter bridges the schema differences between:
- Rekognition DetectProtectiveEquipment (PascalCase keys)
- event_schema.py models (used by rules.py)
- the JSON the dashboard and admin screen read
"""

from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from ..exceptions import InvalidInputError
from .event_schema import (
    BodyPart,
    DetectionResult,
    EquipmentDetection,
    EvaluationOutcome,
    Person,
)


def _require(mapping: Mapping[str, Any], key: str, where: str) -> Any:
    if not isinstance(mapping, Mapping):
        raise InvalidInputError(f"{where} must be an object, got {type(mapping).__name__}")
    if key not in mapping:
        raise InvalidInputError(f"Missing '{key}' in {where}")
    return mapping[key]


def _as_list(value: Any, where: str) -> List[Any]:
    if not isinstance(value, (list, tuple)):
        raise InvalidInputError(f"{where} must be a list, got {type(value).__name__}")
    return list(value)


def detection_result_from_rekognition(raw: Mapping[str, Any]) -> DetectionResult:
    """
    Map a Rekognition DetectProtectiveEquipment response to DetectionResult.

    Input (from the vision service):
        {
            "ProtectiveEquipmentModelVersion": "1.0",
            "Persons": [
                {
                    "Id": 0,
                    "Confidence": 99.1,
                    "BodyParts": [
                        {
                            "Name": "HEAD",
                            "Confidence": 99.9,
                            "EquipmentDetections": [
                                {"Type": "HEAD_COVER", "Confidence": 98.5, ...}
                            ]
                        }
                    ]
                }
            ]
        }

    The service leaves "Persons" out when nobody is in the frame, so a missing
    key means no persons. Anything below that level must be present.
    """
    if not isinstance(raw, Mapping):
        raise InvalidInputError(f"Vision response must be an object, got {type(raw).__name__}")

    try:
        return DetectionResult(
            persons=_map_persons(raw),
            model_version=raw.get("ProtectiveEquipmentModelVersion"),
        )
    except ValidationError as e:
        raise InvalidInputError(f"Malformed vision response: {e}") from e


def _map_persons(raw: Mapping[str, Any]) -> List[Person]:
    persons = []
    for i, raw_person in enumerate(_as_list(raw.get("Persons", []), "Persons")):
        where = f"Persons[{i}]"
        person_id = _require(raw_person, "Id", where)

        body_parts = []
        raw_parts = _as_list(_require(raw_person, "BodyParts", where), f"{where}.BodyParts")
        for j, raw_part in enumerate(raw_parts):
            part_where = f"{where}.BodyParts[{j}]"
            raw_equipment = _as_list(
                _require(raw_part, "EquipmentDetections", part_where),
                f"{part_where}.EquipmentDetections",
            )
            body_parts.append(BodyPart(
                name=_require(raw_part, "Name", part_where),
                confidence=raw_part.get("Confidence"),
                equipment_detections=[
                    EquipmentDetection(
                        type=_require(eq, "Type", f"{part_where}.EquipmentDetections[{k}]"),
                        confidence=eq.get("Confidence"),
                    )
                    for k, eq in enumerate(raw_equipment)
                ],
            ))

        persons.append(Person(
            id=person_id,
            confidence=raw_person.get("Confidence"),
            body_parts=body_parts,
        ))
    return persons


def build_scan_response(
    outcome: EvaluationOutcome,
    raw: Mapping[str, Any],
    scan_id: str,
    timestamp_utc: str,
) -> Dict[str, Any]:
    """
    Response body for POST /api/scan.

    The raw vision payload is passed through for audit/debug purposes.
    """
    body = {
        "scan_id": scan_id,
        "timestamp_utc": timestamp_utc,
        "message": outcome.message,
    }
    body.update(outcome.model_dump(by_alias=True))
    body["rekognition_raw"] = _strip_response_metadata(raw)
    return body


def build_audit_record(
    outcome: EvaluationOutcome,
    result: DetectionResult,
    zone_id: str,
    scan_id: str,
    timestamp_utc: str,
) -> Dict[str, Any]:
    """
    Record stored in the audit log and served by GET /logs.

    Keys match what the admin screen reads:
    zoneId, timestamp, violation, message, personCount, details
    """
    return {
        "scan_id": scan_id,
        "zoneId": zone_id,
        "timestamp": timestamp_utc,
        "violation": outcome.violation_detected,
        "message": outcome.message,
        "personCount": len(result.persons),
        "details": list(outcome.details),
    }


def _strip_response_metadata(raw: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    # boto3 adds ResponseMetadata (request ids, headers); not useful to the UI
    if raw is None:
        return None
    return {k: v for k, v in raw.items() if k != "ResponseMetadata"}
