"""
detection package

Vision service clients. Both return the raw DetectProtectiveEquipment payload:
- detector.py      -> AWS Rekognition (production)
- mock_detector.py -> randomised fake for offline development
"""

from .detector import PPEDetector, RekognitionPPEDetector
from .mock_detector import MockPPEDetector

VISION_BACKENDS = ("rekognition", "mock")


def get_detector(settings) -> PPEDetector:
    """Build the detector selected by settings.vision_backend."""
    backend = settings.vision_backend.lower()
    if backend == "rekognition":
        return RekognitionPPEDetector(
            region=settings.aws_region,
            min_confidence=settings.min_confidence,
            required_equipment=settings.required_equipment_list,
        )
    if backend == "mock":
        return MockPPEDetector(
            helmet_probability=settings.mock_helmet_probability,
            latency_s=settings.mock_latency_s,
        )
    raise ValueError(f"Unknown vision backend '{settings.vision_backend}', expected one of {VISION_BACKENDS}")


__all__ = ["PPEDetector", "RekognitionPPEDetector", "MockPPEDetector", "get_detector", "VISION_BACKENDS"]
