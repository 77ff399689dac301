"""
Scan endpoint: image in, helmet verdict out
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from ...detection import PPEDetector
from ...exceptions import (
    ImagePayloadError,
    ImageTooLargeError,
    InvalidInputError,
    VisionServiceError,
)
from ...violations.adapter import (
    build_audit_record,
    build_scan_response,
    detection_result_from_rekognition,
)
from ...violations.event_schema import current_iso_timestamp, generate_scan_id
from ...violations.rules import evaluate
from ..audit_store import AuditLogStore
from ..config import Settings
from ..dependencies import get_app_settings, get_audit_store, get_detector
from ..utils_backend import decode_image_payload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scan"])


class ScanRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image: Optional[str] = None  # base64, data URI prefix allowed
    zone_id: Optional[str] = Field(default=None, alias="zoneId")


def send_violation_alert(record: dict) -> None:
    """Simulated SNS alert: the notification is only logged."""
    logger.warning(
        "ALERT %s zone=%s: %s",
        record["scan_id"], record["zoneId"], "; ".join(record["details"]),
    )


@router.post("/api/scan")
@router.post("/", include_in_schema=False)
def scan_frame(
    req: ScanRequest,
    settings: Settings = Depends(get_app_settings),
    detector: PPEDetector = Depends(get_detector),
    audit_store: AuditLogStore = Depends(get_audit_store),
):
    """
    The dashboard posts one webcam frame here every few seconds.

    **Body:** `{"image": "data:image/jpeg;base64,...", "zoneId": "Zone-A"}`

    Returns `violation`, `personFound`, `details` plus the raw vision payload.
    """
    try:
        image_bytes = decode_image_payload(req.image)
    except ImagePayloadError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if len(image_bytes) > settings.max_image_size_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Image exceeds {settings.max_image_size_mb} MB",
        )

    scan_id = generate_scan_id()
    timestamp = current_iso_timestamp()
    zone_id = req.zone_id or settings.default_zone_id

    try:
        raw = detector.detect(image_bytes)
    except ImageTooLargeError as e:
        logger.warning("Scan %s: image rejected by vision service: %s", scan_id, e)
        raise HTTPException(status_code=413, detail=str(e))
    except VisionServiceError as e:
        logger.error("Scan %s: vision service failed: %s", scan_id, e)
        raise HTTPException(status_code=502, detail=f"Vision service error: {e}")

    try:
        result = detection_result_from_rekognition(raw)
        outcome = evaluate(result)
    except InvalidInputError as e:
        logger.error("Scan %s: malformed vision response: %s", scan_id, e)
        raise HTTPException(status_code=502, detail=f"Malformed vision response: {e}")

    record = build_audit_record(outcome, result, zone_id, scan_id, timestamp)
    audit_store.add(record)

    logger.info(
        "Scan %s zone=%s persons=%d violation=%s",
        scan_id, zone_id, len(result.persons), outcome.violation_detected,
    )
    if outcome.violation_detected:
        send_violation_alert(record)

    return build_scan_response(outcome, raw, scan_id, timestamp)
