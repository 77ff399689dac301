"""
Helper functions for scripts and camera agents talking to the scan backend

Usage:
```
from heimdall.backend.integration_helper import send_frame_for_scan

result = send_frame_for_scan("frame.jpg", zone_id="Zone-B")
if result and result["violation"]:
    print(result["details"])
```
"""
import base64
import logging
import os
from typing import Dict, List, Optional, Union

import requests

logger = logging.getLogger(__name__)

# Backend URL (change if backend is on different host)
BACKEND_URL = os.environ.get("HEIMDALL_BACKEND_URL", "http://localhost:8000")


def encode_frame(image: Union[bytes, str], mime: str = "image/jpeg") -> str:
    """
    Encode raw image bytes, or the file at a path, as a data URI
    """
    if isinstance(image, str):
        with open(image, "rb") as f:
            image = f.read()
    return f"data:{mime};base64,{base64.b64encode(image).decode('ascii')}"


def check_backend_health(backend_url: str = BACKEND_URL) -> bool:
    """
    Check if backend server is running
    """
    try:
        response = requests.get(f"{backend_url}/", timeout=2)
        return response.status_code == 200
    except requests.exceptions.RequestException as e:
        logger.error("Backend health check failed: %s", e)
        return False


def send_frame_for_scan(
    image: Union[bytes, str],
    zone_id: Optional[str] = None,
    backend_url: str = BACKEND_URL,
    timeout: float = 10,
) -> Optional[Dict]:
    """
    Send one frame (bytes or file path) to POST /api/scan

    Returns:
    - Response dict from backend or None if failed
    """
    payload = {"image": encode_frame(image)}
    if zone_id:
        payload["zoneId"] = zone_id

    try:
        response = requests.post(f"{backend_url}/api/scan", json=payload, timeout=timeout)
    except requests.exceptions.Timeout:
        logger.error("Scan request timed out after %ss", timeout)
        return None
    except requests.exceptions.ConnectionError:
        logger.error("Cannot connect to backend at %s", backend_url)
        return None
    except requests.exceptions.RequestException as e:
        logger.error("Scan request failed: %s", e)
        return None

    if response.status_code == 200:
        return response.json()

    logger.error("Backend error %d: %s", response.status_code, response.text)
    return None


def fetch_audit_logs(
    token: Optional[str] = None,
    violation: Optional[bool] = None,
    backend_url: str = BACKEND_URL,
) -> Optional[List[Dict]]:
    """
    Get audit logs from backend (token from the identity provider, if required)
    """
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    params = {}
    if violation is not None:
        params["violation"] = str(violation).lower()

    try:
        response = requests.get(f"{backend_url}/logs", headers=headers, params=params, timeout=5)
    except requests.exceptions.RequestException as e:
        logger.error("Failed to fetch audit logs: %s", e)
        return None

    if response.status_code == 200:
        return response.json()

    logger.error("Backend error %d while fetching logs", response.status_code)
    return None


# Example usage for testing
if __name__ == "__main__":
    import sys

    logging.basicConfig(level=logging.INFO)

    if not check_backend_health():
        print("Backend is not running. Start it with: uvicorn heimdall.backend.app:app")
        sys.exit(1)

    if len(sys.argv) < 2:
        print("usage: python -m heimdall.backend.integration_helper IMAGE [ZONE]")
        sys.exit(2)

    result = send_frame_for_scan(sys.argv[1], zone_id=sys.argv[2] if len(sys.argv) > 2 else None)
    if result:
        print(f"{result['message']}: {result['details']}")
    else:
        print("Scan failed")
