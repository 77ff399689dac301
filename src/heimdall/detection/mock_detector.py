"""
mock_detector.py
Offline stand-in for the Rekognition detector (no AWS credentials needed).

Always reports one person with a HEAD body part; a HEAD_COVER detection is
attached with probability `helmet_probability`.
"""

import logging
import random
import time
from typing import Any, Dict, Optional

from ..violations.event_schema import HEAD, HEAD_COVER

logger = logging.getLogger(__name__)


class MockPPEDetector:
    def __init__(self, helmet_probability: float = 0.7, latency_s: float = 0.5,
                 rng: Optional[random.Random] = None):
        if not 0.0 <= helmet_probability <= 1.0:
            raise ValueError(f"helmet_probability must be in [0, 1], got {helmet_probability}")
        self.helmet_probability = helmet_probability
        self.latency_s = max(0.0, latency_s)
        self.rng = rng or random.Random()

    def detect(self, image_bytes: bytes) -> Dict[str, Any]:
        if self.latency_s:
            time.sleep(self.latency_s)

        has_helmet = self.rng.random() < self.helmet_probability
        equipment = [{"Type": HEAD_COVER, "Confidence": 98.5}] if has_helmet else []
        logger.info("[mock] simulated scan of %d bytes, helmet=%s", len(image_bytes), has_helmet)

        return {
            "ProtectiveEquipmentModelVersion": "1.0",
            "Persons": [
                {
                    "Id": 1,
                    "Confidence": 99.5,
                    "BodyParts": [
                        {"Name": HEAD, "Confidence": 99.9, "EquipmentDetections": equipment},
                    ],
                }
            ],
        }
