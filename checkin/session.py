"""View-state controller.

Every operation takes the Streamlit ``session_state`` (any mutable mapping
works, which is what the tests use) and turns failures into the single
error banner held in ``state["error"]``.
"""
import copy
import logging

import requests

from .api import ApiError
from .photo import PhotoError, read_upload
from .credential import render_credential, credential_pdf

logger = logging.getLogger(__name__)

NO_EVENT      = "Nenhum evento encontrado para vincular a credencial."
WAITING_EVENT = "Aguardando a disponibilidade de um evento para vincular a credencial."
MISSING       = "Por favor, preencha todos os campos."
REGISTERED    = "Participante cadastrado com sucesso! Sua credencial está pronta."
DOWNLOADED    = "Credencial baixada com sucesso!"

NETWORK_ERRORS = (ApiError, requests.RequestException, ValueError)

DEFAULTS = {
    # form
    "nome":           "",
    "email":          "",
    "empresa":        "",
    "photo_data_url": "",
    "uploader_key":   0,
    # banners / loading
    "busy":           False,
    "error":          "",
    "success":        "",
    # data
    "event":          None,
    "event_loaded":   False,
    "participant":    None,
    "credential_png": None,
    "credential_pdf": None,
    "attendees":      None,
}

def init_state(state):
    for k, v in DEFAULTS.items():
        if k not in state:
            state[k] = copy.copy(v)

def _reason(err) -> str:
    return err.message if isinstance(err, ApiError) else str(err)

def can_register(state) -> bool:
    return bool(state.get("event")) and not state.get("busy")

def dismiss_error(state):
    state["error"] = ""

def dismiss_success(state):
    state["success"] = ""

# ══════════════════════════════════════════════════════════════════
#  EVENT
# ══════════════════════════════════════════════════════════════════
def load_latest_event(state, client):
    """Fetch the latest event, once per session."""
    if state.get("event_loaded"):
        return
    state["event_loaded"] = True
    state["busy"] = True
    try:
        event = client.latest_event()
    except NETWORK_ERRORS as err:
        logger.error("Erro ao buscar eventos: %s", err)
        state["error"] = (f"Erro ao carregar eventos: {_reason(err)}. "
                          "Certifique-se de que o backend está rodando.")
        return
    finally:
        state["busy"] = False
    if event is None:
        state["error"] = NO_EVENT
    else:
        logger.info("Evento atual: %s", event.get("nome"))
        state["event"] = event

# ══════════════════════════════════════════════════════════════════
#  PHOTO
# ══════════════════════════════════════════════════════════════════
def select_photo(state, upload):
    if upload is None:
        state["photo_data_url"] = ""
        return
    try:
        state["photo_data_url"] = read_upload(upload)
        state["error"] = ""
    except PhotoError as err:
        state["error"] = str(err)
        state["photo_data_url"] = ""
        state["uploader_key"] = state.get("uploader_key", 0) + 1   # drops the file from the widget

# ══════════════════════════════════════════════════════════════════
#  REGISTRATION
# ══════════════════════════════════════════════════════════════════
def submit_registration(state, client, cfg=None) -> bool:
    if state.get("busy"):
        return False
    state["error"] = ""; state["success"] = ""
    state["participant"] = None
    state["credential_png"] = None; state["credential_pdf"] = None

    nome    = (state.get("nome") or "").strip()
    email   = (state.get("email") or "").strip()
    empresa = (state.get("empresa") or "").strip()
    if not nome or not email:
        state["error"] = MISSING
        return False
    if not state.get("event"):
        state["error"] = NO_EVENT
        return False

    state["busy"] = True
    try:
        data = client.register_participant(nome, email, empresa, state.get("photo_data_url",""))
    except NETWORK_ERRORS as err:
        logger.error("Erro ao cadastrar participante %s: %s", email, err)
        state["error"] = (f"Erro ao cadastrar: {_reason(err)}. Verifique se o email "
                          "já está em uso ou se há um evento para vincular.")
        return False
    finally:
        state["busy"] = False

    state["participant"] = data
    state["success"] = REGISTERED
    logger.info("Participante cadastrado: %s (%d evento(s))",
                email, len(data.get("eventos_participados") or []))
    render_exports(state, cfg)
    return True

def render_exports(state, cfg=None) -> bool:
    """Draw the credential and its PDF; any failure lands in the banner."""
    participant = state.get("participant")
    if not participant:
        return False
    try:
        png = render_credential(participant, state.get("event"), cfg,
                                state.get("photo_data_url",""))
        pdf = credential_pdf(png)
    except Exception as err:
        logger.exception("Erro ao gerar credencial")
        state["error"] = f"Erro ao baixar a credencial: {err}."
        return False
    state["credential_png"] = png
    state["credential_pdf"] = pdf
    return True

def mark_downloaded(state):
    state["success"] = DOWNLOADED

def new_credential(state):
    for k in ("nome","email","empresa","photo_data_url","success"):
        state[k] = ""
    state["participant"] = None
    state["credential_png"] = None; state["credential_pdf"] = None
    state["uploader_key"] = state.get("uploader_key", 0) + 1

# ══════════════════════════════════════════════════════════════════
#  ORGANIZER PANEL
# ══════════════════════════════════════════════════════════════════
def load_attendees(state, client) -> bool:
    event = state.get("event") or {}
    if not event.get("id"):
        state["error"] = "Erro ao carregar participantes: evento sem identificador."
        return False
    try:
        state["attendees"] = client.event_participants(event["id"])
    except NETWORK_ERRORS as err:
        logger.error("Erro ao buscar participantes do evento %s: %s", event["id"], err)
        state["error"] = f"Erro ao carregar participantes: {_reason(err)}."
        return False
    return True
