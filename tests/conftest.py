"""
Shared pytest fixtures for the Heimdall tests.
"""
import base64

import pytest
from fastapi.testclient import TestClient

from heimdall.backend.app import create_app
from heimdall.backend.audit_store import AuditLogStore
from heimdall.backend.config import Settings

FAKE_JPEG = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00fake-frame"


def rekognition_person(person_id, head_equipment=None, extra_parts=()):
    """Rekognition-shaped person; head_equipment=None means no HEAD part at all."""
    parts = [
        {"Name": name, "Confidence": 97.0, "EquipmentDetections": [{"Type": t, "Confidence": 91.0} for t in eq]}
        for name, eq in extra_parts
    ]
    if head_equipment is not None:
        parts.insert(0, {
            "Name": "HEAD",
            "Confidence": 99.2,
            "EquipmentDetections": [{"Type": t, "Confidence": 88.0} for t in head_equipment],
        })
    return {"Id": person_id, "Confidence": 99.0, "BodyParts": parts}


class FakeDetector:
    """Returns a canned vision payload and remembers what it was sent."""

    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {"Persons": []}
        self.error = error
        self.calls = []

    def detect(self, image_bytes):
        self.calls.append(image_bytes)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def jpeg_data_uri():
    return "data:image/jpeg;base64," + base64.b64encode(FAKE_JPEG).decode("ascii")


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        vision_backend="mock",
        audit_log_path="",
        allowed_origins="*",
        default_zone_id="Zone-A",
    )


@pytest.fixture
def fake_detector():
    return FakeDetector({
        "ProtectiveEquipmentModelVersion": "1.0",
        "Persons": [rekognition_person(1, head_equipment=[])],
        "ResponseMetadata": {"RequestId": "abc", "HTTPStatusCode": 200},
    })


@pytest.fixture
def audit_store():
    return AuditLogStore(path=None, max_entries=50)


@pytest.fixture
def client(settings, fake_detector, audit_store):
    app = create_app(settings=settings, detector=fake_detector, audit_store=audit_store)
    with TestClient(app) as c:
        yield c
