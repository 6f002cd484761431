"""Alert emitters: the remote alert service and an in-memory collector."""

import logging
from typing import Optional

import httpx

from oralicense_engine.alerts.schemas import Alert
from oralicense_engine.common.exceptions import AlertSubmissionError

logger = logging.getLogger(__name__)


class AlertServiceClient:
    """
    Synchronous HTTP client submitting alerts to the alert service.

    Each alert is posted once; a failed submission raises
    AlertSubmissionError and is not retried here.
    """

    def __init__(
        self,
        server_url: str = "http://localhost:8081",
        api_key: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.server_url = server_url.rstrip("/")
        self.api_key = api_key
        self._http = httpx.Client(
            base_url=self.server_url,
            timeout=timeout,
        )

    def _headers(self) -> dict[str, str]:
        headers = {}
        if self.api_key:
            headers["X-OraLicense-Api-Key"] = self.api_key
        return headers

    def throw_new_alert(self, alert: Alert) -> None:
        try:
            resp = self._http.post(
                "/alerts",
                content=alert.model_dump_json(),
                headers={"Content-Type": "application/json", **self._headers()},
            )
        except httpx.HTTPError as e:
            raise AlertSubmissionError(
                f"Can't throw new alert {alert.alert_code.value}: {e}"
            ) from e

        if resp.status_code < 200 or resp.status_code > 299:
            raise AlertSubmissionError(
                f"Can't throw new alert {alert.alert_code.value}: HTTP {resp.status_code}"
            )

    def close(self) -> None:
        """Close the HTTP client."""
        self._http.close()


class CollectingAlertEmitter:
    """Keeps alerts in memory instead of submitting them (dry runs)."""

    def __init__(self):
        self.alerts: list[Alert] = []

    def throw_new_alert(self, alert: Alert) -> None:
        logger.info("Collected alert %s for %s", alert.alert_code.value, alert.hostname)
        self.alerts.append(alert)
