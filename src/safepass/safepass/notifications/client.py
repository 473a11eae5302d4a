from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

import httpx

from ..core.exceptions import RemoteServiceError

logger = logging.getLogger(__name__)

ALLERGY_NOTIFICATION = "allergy-notification"
ATTENDANCE_NOTIFICATION = "attendance-notification"
CSV_PROCESSOR = "csv-processor"


class FunctionsClient:
    """Calls the hosted serverless functions as black boxes.

    Each function takes a JSON body via POST {base_url}/{name} and answers JSON.
    """

    def __init__(
        self,
        base_url: str,
        *,
        api_key: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def invoke(self, name: str, body: Dict[str, Any]) -> Dict[str, Any]:
        logger.debug("Invoking function %s", name)
        try:
            resp = self._client.post(f"/{name}", json=body)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = getattr(e.response, "status_code", None)
            logger.error("Function %s returned HTTP %s", name, status)
            raise RemoteServiceError(f"{name} returned HTTP {status}") from e
        except httpx.RequestError as e:
            logger.error("Network error calling function %s: %s", name, e)
            raise RemoteServiceError(f"Could not reach {name}") from e

        if not resp.content:
            return {}
        try:
            data = resp.json()
        except ValueError as e:
            logger.exception("Failed to decode %s response", name)
            raise RemoteServiceError(f"Invalid response from {name}") from e
        return data if isinstance(data, dict) else {"data": data}

    def notify_allergy(
        self,
        *,
        student_name: str,
        allergies: Sequence[str],
        location: str,
        scanned_by: str,
        timestamp: datetime,
    ) -> Dict[str, Any]:
        return self.invoke(
            ALLERGY_NOTIFICATION,
            {
                "studentName": student_name,
                "allergies": list(allergies),
                "location": location,
                "scannedBy": scanned_by,
                "timestamp": timestamp.isoformat(),
            },
        )

    def notify_attendance(
        self,
        *,
        student_id: str,
        student_name: str,
        message: str,
        parent_email: Optional[str],
        parent_phone: Optional[str],
        notification_type: str,
    ) -> Dict[str, Any]:
        return self.invoke(
            ATTENDANCE_NOTIFICATION,
            {
                "studentId": student_id,
                "studentName": student_name,
                "message": message,
                "parentEmail": parent_email,
                "parentPhone": parent_phone,
                "notificationType": notification_type,
            },
        )

    def process_csv(self, *, csv_data: str, upload_type: str) -> Dict[str, Any]:
        data = self.invoke(CSV_PROCESSOR, {"csvData": csv_data, "type": upload_type})
        return {
            "processed": int(data.get("processed") or 0),
            "errors": [str(e) for e in (data.get("errors") or [])],
        }
