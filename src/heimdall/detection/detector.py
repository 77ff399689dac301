"""
detector.py
AWS Rekognition protective-equipment detector wrapper.
Detects persons, their body parts and the equipment covering each part.
"""

import logging
from typing import Any, Dict, Protocol, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import ImageTooLargeError, VisionServiceError

logger = logging.getLogger(__name__)

# Rekognition rejects images above 5 MB when passed as raw bytes
MAX_IMAGE_BYTES = 5 * 1024 * 1024


class PPEDetector(Protocol):
    def detect(self, image_bytes: bytes) -> Dict[str, Any]:
        """Return a DetectProtectiveEquipment-shaped payload for one image."""
        ...


class RekognitionPPEDetector:
    def __init__(self, region: str = "us-east-1", min_confidence: float = 50.0,
                 required_equipment: Sequence[str] = ("HEAD_COVER",), client: Any = None):
        self.region = region
        self.min_confidence = float(min_confidence)
        self.required_equipment = list(required_equipment)
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client("rekognition", region_name=self.region)
            logger.info("Created Rekognition client in %s", self.region)
        return self._client

    def detect(self, image_bytes: bytes) -> Dict[str, Any]:
        """Run protective-equipment detection on one encoded image (JPEG/PNG)."""
        if not image_bytes:
            raise VisionServiceError("Empty image")
        if len(image_bytes) > MAX_IMAGE_BYTES:
            raise ImageTooLargeError(
                f"Image is {len(image_bytes)} bytes, Rekognition accepts at most {MAX_IMAGE_BYTES}"
            )

        try:
            response = self.client.detect_protective_equipment(
                Image={"Bytes": image_bytes},
                SummarizationAttributes={
                    "MinConfidence": self.min_confidence,
                    "RequiredEquipmentTypes": self.required_equipment,
                },
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error("Rekognition rejected the request (%s): %s", code, e)
            raise VisionServiceError(f"Rekognition error {code}: {e}") from e
        except BotoCoreError as e:
            logger.error("Could not reach Rekognition: %s", e)
            raise VisionServiceError(f"Rekognition unavailable: {e}") from e

        logger.debug("Rekognition returned %d person(s)", len(response.get("Persons", [])))
        return response
