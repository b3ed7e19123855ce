import io
from unittest.mock import Mock

import pytest
from PIL import Image


class FakeUpload:
    """Stand-in for Streamlit's UploadedFile."""

    def __init__(self, data=b"", type="image/png", name="foto.png"):
        self.data  = data
        self.type  = type
        self.name  = name
        self.reads = 0

    def getvalue(self):
        self.reads += 1
        return self.data


class FakeClient:

    def __init__(self, event=None, participant=None, error=None, attendees=None):
        self.event       = event
        self.participant = participant
        self.error       = error
        self.attendees   = attendees or []
        self.calls       = []

    def latest_event(self):
        self.calls.append(("latest_event",))
        if self.error: raise self.error
        return self.event

    def register_participant(self, nome, email, empresa="", photo_data_url=""):
        self.calls.append(("register", nome, email, empresa, photo_data_url))
        if self.error: raise self.error
        return self.participant

    def event_participants(self, event_id):
        self.calls.append(("participants", event_id))
        if self.error: raise self.error
        return self.attendees


def make_response(status=200, json_data=None, text="", json_error=False):
    resp = Mock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    resp.text = text
    if json_error:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = json_data
    return resp


def png_bytes(size=(40, 30), color=(200, 30, 30)):
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def event():
    return {"id": "665f1c2e9b1e8a0012345678", "nome": "Meetup Go #42",
            "data": "2025-07-10T19:00:00", "endereco": "Av. Paulista, 1000",
            "background_color": "#0B3D91", "text_color": "#FFFFFF"}


@pytest.fixture
def participant():
    return {"id": "665f1c2e9b1e8a0087654321", "nome": "Ana Souza",
            "email": "ana@example.com", "empresa": "Gophers Ltda",
            "eventos_participados": ["a", "b", "c"]}


@pytest.fixture
def state():
    from checkin import session
    s = {}
    session.init_state(s)
    return s


@pytest.fixture
def cfg():
    # empty logo URL keeps rendering offline
    return {"logo_url": "", "show_qr": True, "timezone": "America/Sao_Paulo",
            "default_bg_color": "#1F2937", "default_text_color": "#FFFFFF"}
