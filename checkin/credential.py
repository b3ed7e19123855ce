"""Credential card: Pillow render, PDF pagination, image share helpers."""
import io, re, json, base64, logging
from datetime import datetime
from urllib.parse import quote
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import qrcode
import requests
from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError
from reportlab.pdfgen import canvas as pdf_canvas
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader

from .colors import palette, hex_rgb
from .icons import draw_star, draw_profile_icon
from .photo import open_image

logger = logging.getLogger(__name__)

MONTHS = ["janeiro","fevereiro","março","abril","maio","junho",
          "julho","agosto","setembro","outubro","novembro","dezembro"]

W, PAD   = 720, 64
CANVAS_H = 1600
PHOTO_D  = 192
STAR     = 40
STAR_GAP = 8
GRAY     = (156,163,175)

# PDF layout, millimetres
PDF_IMG_W  = 190
PDF_LEFT   = 10
PDF_TOP    = 10

# ══════════════════════════════════════════════════════════════════
#  CORE HELPERS
# ══════════════════════════════════════════════════════════════════
def _fnt(size, bold=False):
    cands = (["arialbd.ttf","DejaVuSans-Bold.ttf","calibrib.ttf"]
             if bold else ["arial.ttf","DejaVuSans.ttf","calibri.ttf"])
    for f in cands:
        try: return ImageFont.truetype(f, size)
        except OSError: pass
    return ImageFont.load_default(size)

def _wrap(draw, text, font, max_w) -> list:
    lines, cur = [], ""
    for w in text.split():
        test = (cur + " " + w).strip()
        if cur and draw.textbbox((0,0), test, font=font)[2] > max_w:
            lines.append(cur); cur = w
        else: cur = test
    if cur: lines.append(cur)
    return lines

def _blend(a, b, t) -> tuple:
    return tuple(int(round(x*(1-t) + y*t)) for x, y in zip(a, b))

def format_event_date(value, tz_name="America/Sao_Paulo") -> str:
    """ISO timestamp → "10 de julho de 2025 às 19:00" in the given zone."""
    if not value:
        return ""
    s = str(value).strip()
    if s.endswith("Z"): s = s[:-1] + "+00:00"
    # Go emits 1 to 9 fractional digits, fromisoformat wants 6
    s = re.sub(r"\.(\d+)", lambda m: "." + m.group(1)[:6].ljust(6, "0"), s, count=1)
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return str(value)
    if dt.tzinfo is not None:
        try:
            dt = dt.astimezone(ZoneInfo(tz_name))
        except (ZoneInfoNotFoundError, OverflowError, ValueError):
            pass
    return f"{dt.day} de {MONTHS[dt.month-1]} de {dt.year} às {dt:%H:%M}"

def participation_count(participant):
    """Length of ``eventos_participados``, or None when the server left it out."""
    hist = (participant or {}).get("eventos_participados")
    return None if hist is None else len(hist)

def star_positions(count, width=W-2*PAD, size=STAR, gap=STAR_GAP) -> list:
    """(x, y) of each star inside a box ``width`` wide, rows centred."""
    per_row = max(1, (width + gap) // (size + gap))
    out = []
    for i in range(count):
        row, col = divmod(i, per_row)
        in_row   = min(per_row, count - row*per_row)
        row_w    = in_row*size + (in_row-1)*gap
        out.append(((width-row_w)//2 + col*(size+gap), row*(size+gap)))
    return out

def make_qr(data, fill="#000000", back="white"):
    qr = qrcode.QRCode(version=1, error_correction=qrcode.constants.ERROR_CORRECT_M, box_size=10, border=2)
    qr.add_data(data); qr.make(fit=True)
    buf = io.BytesIO()
    qr.make_image(fill_color=fill, back_color=back).save(buf, format="PNG")
    return buf.getvalue()

_LOGOS = {}   # url → bytes, successful fetches only

def fetch_logo(url):
    """Logo bytes, or None if the URL is empty or unreachable.

    Failures are not remembered, so the next credential tries again.
    """
    if not url:
        return None
    if url in _LOGOS:
        return _LOGOS[url]
    try:
        r = requests.get(url, timeout=10)
        r.raise_for_status()
    except requests.RequestException as err:
        logger.warning("Logo indisponível (%s): %s", url, err)
        return None
    _LOGOS[url] = r.content
    return r.content

def _logo_image(url, height=96):
    raw = fetch_logo(url)
    if raw:
        try:
            li = Image.open(io.BytesIO(raw)).convert("RGBA")
            r  = height / li.height
            return li.resize((max(1, int(li.width*r)), height), Image.LANCZOS)
        except (OSError, UnidentifiedImageError) as err:
            logger.warning("Logo ilegível: %s", err)
    ph = Image.new("RGBA", (height, height), (255,255,255,255))
    ImageDraw.Draw(ph).text((height//2, height//2), "Logo", font=_fnt(20), fill=(0,0,0), anchor="mm")
    return ph

def _circle(img, d):
    side = min(img.size)
    l, t = (img.width-side)//2, (img.height-side)//2
    img  = img.crop((l, t, l+side, t+side)).resize((d, d), Image.LANCZOS)
    mask = Image.new("L", (d, d), 0)
    ImageDraw.Draw(mask).ellipse([0, 0, d-1, d-1], fill=255)
    out = Image.new("RGBA", (d, d), (0,0,0,0))
    out.paste(img, (0, 0), mask)
    return out

# ══════════════════════════════════════════════════════════════════
#  CREDENTIAL CARD
# ══════════════════════════════════════════════════════════════════
def render_credential(participant, event=None, cfg=None, photo_data_url="") -> bytes:
    """Draw the credential and return it as PNG bytes."""
    cfg = cfg or {}
    pal = palette(event, cfg.get("default_bg_color","#1F2937"), cfg.get("default_text_color","#FFFFFF"))
    bg, txt, shade = hex_rgb(pal["bg"]), hex_rgb(pal["text"], (255,255,255)), hex_rgb(pal["shade"])

    fill = (*_blend(bg, shade, .7), 255)
    img  = Image.new("RGBA", (W, CANVAS_H), fill)
    draw = ImageDraw.Draw(img)
    cx, y, inner = W//2, PAD, W - 2*PAD

    def room(need):
        # grow the canvas so the next ``need`` pixels fit below y
        nonlocal img, draw
        if y + need + PAD > img.height:
            grown = Image.new("RGBA", (W, max(img.height*2, y + need + PAD)), fill)
            grown.paste(img, (0, 0))
            img, draw = grown, ImageDraw.Draw(grown)

    # ── Photo / profile icon ─────────────────────────────────────
    src   = photo_data_url or participant.get("profile_picture_base64")
    photo = open_image(src) if src else None
    box   = [cx-PHOTO_D//2, y, cx+PHOTO_D//2, y+PHOTO_D]
    if photo is not None:
        img.alpha_composite(_circle(photo, PHOTO_D), (box[0], box[1]))
    else:
        draw.ellipse(box, fill=(55,65,81))
        draw_profile_icon(draw, cx, y+PHOTO_D//2, 96, txt)
    draw.ellipse(box, outline=txt, width=4)
    y += PHOTO_D + 32

    # ── Identity ─────────────────────────────────────────────────
    draw.text((cx,y), "Participante:", font=_fnt(36), fill=txt, anchor="mt"); y += 56
    fn = _fnt(72, True)
    for ln in _wrap(draw, (participant.get("nome") or "").upper(), fn, inner):
        room(84)
        draw.text((cx,y), ln, font=fn, fill=txt, anchor="mt"); y += 84
    y += 16
    room(220)   # email, company and the participation heading
    draw.text((cx,y), participant.get("email") or "", font=_fnt(40), fill=txt, anchor="mt"); y += 56
    if participant.get("empresa"):
        draw.text((cx,y), participant["empresa"], font=_fnt(36, True), fill=txt, anchor="mt"); y += 52

    # ── Participations ───────────────────────────────────────────
    count = participation_count(participant)
    if count:
        y += 16
        draw.text((cx,y), "Participações:", font=_fnt(32, True), fill=txt, anchor="mt"); y += 48
        pos = star_positions(count, inner)
        room(pos[-1][1] + STAR + 32)
        for sx, sy in pos:
            draw_star(draw, PAD+sx, y+sy, STAR, txt)
        y += pos[-1][1] + STAR + 32
    elif count == 0:
        y += 16
        draw.text((cx,y), "Primeira participação!", font=_fnt(28), fill=GRAY, anchor="mt"); y += 64
    else:
        y += 16

    # ── Event box ────────────────────────────────────────────────
    if event:
        fe, fd = _fnt(48, True), _fnt(28)
        names  = _wrap(draw, event.get("nome",""), fe, inner-64)
        extra  = [t for t in (format_event_date(event.get("data"), cfg.get("timezone","America/Sao_Paulo")),
                              event.get("endereco","")) if t]
        bh = 32 + 44 + 60*len(names) + 40*len(extra) + 24
        room(bh + 48)
        overlay = Image.new("RGBA", img.size, (0,0,0,0))
        ImageDraw.Draw(overlay).rounded_rectangle([PAD, y, W-PAD, y+bh], 16, fill=(255,255,255,51))
        img.alpha_composite(overlay)
        ey = y + 32
        draw.text((cx,ey), "Evento:", font=_fnt(32), fill=txt, anchor="mt"); ey += 44
        for ln in names:
            draw.text((cx,ey), ln, font=fe, fill=txt, anchor="mt"); ey += 60
        for t in extra:
            draw.text((cx,ey), t, font=fd, fill=txt, anchor="mt"); ey += 40
        y += bh + 48

    # ── Logo + door QR ───────────────────────────────────────────
    logo = _logo_image(cfg.get("logo_url",""))
    if logo.width > inner:
        logo = logo.resize((inner, max(1, logo.height*inner//logo.width)), Image.LANCZOS)
    room(logo.height + 32 + 192)
    img.alpha_composite(logo, (cx - logo.width//2, y)); y += logo.height + 32
    if cfg.get("show_qr") and participant.get("id"):
        q = Image.open(io.BytesIO(make_qr(str(participant["id"])))).convert("RGBA").resize((160,160), Image.NEAREST)
        img.alpha_composite(q, (cx-80, y)); y += 160 + 32
    H = y + PAD - 32

    # ── Rounded frame ────────────────────────────────────────────
    body = img.crop((0, 0, W, H))
    mask = Image.new("L", (W, H), 0)
    ImageDraw.Draw(mask).rounded_rectangle([0, 0, W-1, H-1], 32, fill=255)
    out = Image.new("RGBA", (W, H), (0,0,0,0))
    out.paste(body, (0, 0), mask)
    ImageDraw.Draw(out).rounded_rectangle([4, 4, W-5, H-5], 30, outline=txt, width=8)

    buf = io.BytesIO(); out.save(buf, format="PNG", dpi=(192,192))
    logger.info("Credencial gerada para %s (%dx%d)", participant.get("email",""), W, H)
    return buf.getvalue()

# ══════════════════════════════════════════════════════════════════
#  PDF  (A4 portrait, paginated)
# ══════════════════════════════════════════════════════════════════
def pdf_offsets(img_w, img_h, width_mm=PDF_IMG_W, page_h_mm=A4[1]/mm, top_mm=PDF_TOP):
    """Top offset (mm) of the image on each page, plus its rendered height.

    The first page starts ``top_mm`` down; every further page shifts the image
    up by one page height until what is left no longer reaches a new page.
    """
    img_h_mm = img_h * width_mm / img_w
    offsets  = [top_mm]
    left     = img_h_mm - page_h_mm
    while left >= 0:
        offsets.append(left - img_h_mm)
        left -= page_h_mm
    return offsets, img_h_mm

def credential_pdf(png: bytes) -> bytes:
    img = Image.open(io.BytesIO(png))
    offsets, ih = pdf_offsets(*img.size)
    pw, ph = A4
    buf = io.BytesIO()
    c   = pdf_canvas.Canvas(buf, pagesize=A4)
    for i, off in enumerate(offsets):
        if i: c.showPage()
        c.drawImage(ImageReader(io.BytesIO(png)), PDF_LEFT*mm, ph - (off+ih)*mm,
                    width=PDF_IMG_W*mm, height=ih*mm, mask="auto")
    c.save()
    return buf.getvalue()

def export_name(nome, ext) -> str:
    return "credencial_" + re.sub(r"\s", "_", nome or "") + "." + ext

# ══════════════════════════════════════════════════════════════════
#  SHARE
# ══════════════════════════════════════════════════════════════════
def share_text(participant, event=None) -> str:
    ev    = (event or {}).get("nome") or "o evento"
    count = participation_count(participant) or 0
    txt   = f"Fiz check-in em {ev}! Participante: {participant.get('nome','')}"
    if count > 1:
        txt += f" ({count} participações)"
    return txt

def share_links(text, app_url="") -> dict:
    full = f"{text} {app_url}".strip()
    return {
        "WhatsApp": f"https://api.whatsapp.com/send?text={quote(full)}",
        "LinkedIn": f"https://www.linkedin.com/sharing/share-offsite/?url={quote(app_url)}",
        "X":        f"https://twitter.com/intent/tweet?text={quote(full)}",
    }

def share_widget_html(png: bytes, filename, text, bg="#374151", fg="#FFFFFF") -> str:
    """Share button for ``components.html``: Web Share with the PNG attached,
    falling back to a plain download when the browser cannot share files."""
    b64 = base64.b64encode(png).decode("ascii")
    return f"""
<div style="font-family:sans-serif;">
  <button id="share" style="width:100%;padding:.7rem;border:none;border-radius:10px;
      background:{bg};color:{fg};font-weight:bold;font-size:1rem;cursor:pointer;">
    📤 Compartilhar Credencial</button>
  <a id="dl" download={json.dumps(filename)} href="data:image/png;base64,{b64}"
     style="display:none;text-align:center;margin-top:6px;color:{fg};">⬇️ Baixar imagem</a>
</div>
<script>
const fname = {json.dumps(filename)}, stext = {json.dumps(text)};
function fallback() {{
  const a = document.getElementById("dl");
  a.style.display = "block"; a.click();
}}
document.getElementById("share").onclick = async () => {{
  try {{
    const blob = await (await fetch(document.getElementById("dl").href)).blob();
    const file = new File([blob], fname, {{type: "image/png"}});
    if (navigator.canShare && navigator.canShare({{files: [file]}})) {{
      await navigator.share({{files: [file], title: "Credencial", text: stext}});
    }} else {{ fallback(); }}
  }} catch (e) {{
    if (e.name !== "AbortError") fallback();
  }}
}};
</script>
"""
