"""HTTP client for the check-in backend.

Endpoints used:

    GET  /events                       → list of events (may be null)
    POST /participants                 → participant, linked to the latest event
    GET  /events/<id>/participants     → participants of one event

Non-2xx answers raise :class:`ApiError`; connection problems surface as the
usual ``requests.RequestException``.
"""
import logging

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Backend answered with a non-2xx status."""

    def __init__(self, message, status=None):
        super().__init__(message)
        self.message = message
        self.status  = status


def server_message(resp) -> str:
    """JSON ``message`` field, else the plain text body (Go's http.Error)."""
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return (resp.text or "").strip()


UNEXPECTED = "Resposta inesperada do servidor"

def _expect(resp, kind, empty=None):
    """Decoded JSON body of a 2xx answer, which must be a ``kind`` (null → ``empty``)."""
    data = resp.json()
    if data is None and empty is not None:
        return empty
    if not isinstance(data, kind):
        raise ApiError(UNEXPECTED, resp.status_code)
    return data


class CheckinClient:

    def __init__(self, base_url, timeout=None):
        self.base_url = base_url.rstrip("/")
        self.timeout  = timeout

    def _url(self, path):
        return f"{self.base_url}/{path.lstrip('/')}"

    # ── Events ───────────────────────────────────────────────────
    def list_events(self) -> list:
        resp = requests.get(self._url("/events"), timeout=self.timeout)
        if not resp.ok:
            raise ApiError(f"Erro HTTP: {resp.status_code}", resp.status_code)
        return _expect(resp, list, [])

    def latest_event(self):
        """Last event of the list, or None.

        The backend returns events in insertion order and does not sort, so
        "last" stands in for "most recent".
        """
        events = self.list_events()
        logger.info("%d evento(s) recebido(s)", len(events))
        if events and not isinstance(events[-1], dict):
            raise ApiError(UNEXPECTED, 200)
        return events[-1] if events else None

    # ── Participants ─────────────────────────────────────────────
    def register_participant(self, nome, email, empresa="", photo_data_url="") -> dict:
        payload = {"nome": nome, "email": email, "empresa": empresa}
        if photo_data_url:
            payload["profile_picture_base64"] = photo_data_url
        resp = requests.post(self._url("/participants"), json=payload, timeout=self.timeout)
        if not resp.ok:
            msg = server_message(resp) or f"Erro no cadastro: {resp.status_code}"
            raise ApiError(msg, resp.status_code)
        return _expect(resp, dict)

    def event_participants(self, event_id) -> list:
        resp = requests.get(self._url(f"/events/{event_id}/participants"), timeout=self.timeout)
        if not resp.ok:
            raise ApiError(server_message(resp) or f"Erro HTTP: {resp.status_code}", resp.status_code)
        return _expect(resp, list, [])
