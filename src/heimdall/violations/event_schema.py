"""
event_schema.py
Defines the canonical data structures for one safety scan.

The vision service returns loosely shaped JSON; everything downstream of the
adapter works on these models instead:
- DetectionResult -> persons -> body parts -> equipment detections
- EvaluationOutcome -> what the evaluator decided

This schema ensures consistency between:
- Vision response mapping (adapter.py)
- Violation logic layer (rules.py)
- Backend & audit log (backend/)
"""

import uuid
import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ============================================================
# Taxonomy
# ============================================================

HEAD = "HEAD"
HEAD_COVER = "HEAD_COVER"

NO_WORKER_DETECTED = "No Worker Detected"
NO_HELMET_TEMPLATE = "Person ID {person_id}: No Helmet"
HEAD_OBSCURED_TEMPLATE = "Person ID {person_id}: Head Obscured"


# ============================================================
# Unique ID and timestamp generation
# ============================================================

def generate_scan_id() -> str:
    """
    Generates a unique readable scan ID.
    Example: 'S-12AB34CD'
    """
    uid = uuid.uuid4().hex[:8].upper()
    return f"S-{uid}"


def current_iso_timestamp() -> str:
    """
    Returns the current timestamp in ISO8601 (UTC) format.
    Example: '2025-10-26T14:45:31.200000Z'
    """
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.isoformat().replace("+00:00", "Z")


# ============================================================
# Detection result (input to the evaluator)
# ============================================================

class EquipmentDetection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str
    confidence: Optional[float] = None


class BodyPart(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    confidence: Optional[float] = None
    # no default: a body part without this list is corrupt, not "no equipment"
    equipment_detections: List[EquipmentDetection] = Field(alias="equipmentDetections")


class Person(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Union[int, str]
    confidence: Optional[float] = None
    body_parts: List[BodyPart] = Field(alias="bodyParts")

    def find_body_part(self, name: str) -> Optional[BodyPart]:
        """First body part with the given name, or None."""
        for part in self.body_parts:
            if part.name == name:
                return part
        return None


class DetectionResult(BaseModel):
    """All persons the vision service found in one image, in detection order."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    persons: List[Person]
    model_version: Optional[str] = Field(default=None, alias="modelVersion")


# ============================================================
# Evaluation outcome (output of the evaluator)
# ============================================================

class EvaluationOutcome(BaseModel):
    """
    Verdict for one DetectionResult.

    Serialised with by_alias=True it produces the wire names the dashboard
    reads: violation, personFound, details.
    """

    model_config = ConfigDict(populate_by_name=True)

    violation_detected: bool = Field(alias="violation")
    person_found: bool = Field(alias="personFound")
    details: List[str] = Field(default_factory=list)

    @property
    def message(self) -> str:
        if not self.person_found:
            return NO_WORKER_DETECTED
        if self.violation_detected:
            return "Safety Violation Detected"
        return "Site Compliant"
