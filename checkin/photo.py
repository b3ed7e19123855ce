import io, base64, logging

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

INVALID_TYPE = "Por favor, selecione um arquivo de imagem válido."
READ_FAILED  = "Erro ao ler o arquivo. Tente novamente."


class PhotoError(Exception):
    pass


def is_image_type(mime) -> bool:
    return bool(mime) and mime.startswith("image/")

def to_data_url(data: bytes, mime: str) -> str:
    return f"data:{mime};base64," + base64.b64encode(data).decode("ascii")

def from_data_url(url: str) -> bytes:
    """Raw bytes of a ``data:...;base64,`` URL (a bare Base64 string works too)."""
    if not url:
        return b""
    _, _, payload = url.partition("base64,") if "base64," in url else ("", "", url)
    return base64.b64decode(payload)

def read_upload(upload) -> str:
    """Streamlit UploadedFile → data URL. Type is checked before any read."""
    mime = getattr(upload, "type", "") or ""
    if not is_image_type(mime):
        raise PhotoError(INVALID_TYPE)
    try:
        data = upload.getvalue()
        Image.open(io.BytesIO(data)).verify()
    except (OSError, UnidentifiedImageError, ValueError) as err:
        logger.warning("Falha ao ler %s: %s", getattr(upload, "name", "?"), err)
        raise PhotoError(READ_FAILED) from err
    return to_data_url(data, mime)

def open_image(url: str):
    """PIL image for a data URL, or None when it cannot be decoded."""
    try:
        return Image.open(io.BytesIO(from_data_url(url))).convert("RGBA")
    except (OSError, UnidentifiedImageError, ValueError) as err:
        logger.warning("Foto de perfil inválida: %s", err)
        return None
