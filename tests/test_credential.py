import io
from unittest.mock import patch

import pytest
import requests
from PIL import Image, ImageDraw

from checkin import credential
from checkin.credential import (format_event_date, participation_count, star_positions,
                                pdf_offsets, credential_pdf, render_credential,
                                export_name, share_text, share_links, share_widget_html)
from checkin.photo import to_data_url
from checkin.icons import draw_star
from conftest import png_bytes, make_response


# ── Dates ────────────────────────────────────────────────────────
def test_event_date_long_portuguese_form():
    assert format_event_date("2025-07-10T19:00:00") == "10 de julho de 2025 às 19:00"


def test_event_date_go_nanoseconds():
    assert format_event_date("2025-03-01T08:05:00.123456789") == "1 de março de 2025 às 08:05"


@pytest.mark.parametrize("value", ["2025-03-01T08:05:00.5", "2025-03-01T08:05:00.25Z",
                                   "2025-03-01T08:05:00.1234-03:00"])
def test_event_date_short_fractions(value):
    assert format_event_date(value).startswith("1 de março de 2025 às ")


def test_event_date_with_utc_suffix():
    assert format_event_date("2025-12-24T15:30:00Z").startswith("24 de dezembro de 2025 às ")


@pytest.mark.parametrize("value,expected", [("", ""), (None, ""), ("amanhã", "amanhã")])
def test_event_date_fallbacks(value, expected):
    assert format_event_date(value) == expected


# ── Participation ────────────────────────────────────────────────
def test_participation_count():
    assert participation_count({}) is None
    assert participation_count({"eventos_participados": None}) is None
    assert participation_count({"eventos_participados": []}) == 0
    assert participation_count({"eventos_participados": ["a", "b"]}) == 2


def test_star_positions_single_row_centered():
    pos = star_positions(3, width=200, size=40, gap=8)
    assert len(pos) == 3
    assert {y for _, y in pos} == {0}
    row_w = 3*40 + 2*8
    assert pos[0][0] == (200 - row_w) // 2


def test_star_positions_wrap():
    pos = star_positions(20, width=592, size=40, gap=8)
    assert len(pos) == 20
    assert [y for _, y in pos].count(0) == 12
    assert pos[-1][1] == 48


def _texts(monkeypatch):
    seen = []
    orig = ImageDraw.ImageDraw.text

    def spy(self, xy, text, *args, **kwargs):
        seen.append(text)
        return orig(self, xy, text, *args, **kwargs)

    monkeypatch.setattr(ImageDraw.ImageDraw, "text", spy)
    return seen


def test_one_star_per_past_event(participant, event, cfg):
    with patch("checkin.credential.draw_star") as star:
        render_credential(participant, event, cfg)
    assert star.call_count == 3


def test_first_participation_message(monkeypatch, participant, event, cfg):
    participant["eventos_participados"] = []
    seen = _texts(monkeypatch)
    with patch("checkin.credential.draw_star") as star:
        render_credential(participant, event, cfg)
    assert star.call_count == 0
    assert "Primeira participação!" in seen
    assert "Participações:" not in seen


def test_card_content(monkeypatch, participant, event, cfg):
    seen = _texts(monkeypatch)
    png = render_credential(participant, event, cfg)
    img = Image.open(io.BytesIO(png))
    assert img.format == "PNG"
    assert img.width == credential.W
    for text in ("Participante:", "ANA SOUZA", "ana@example.com", "Gophers Ltda",
                 "Participações:", "Evento:", "Meetup Go #42",
                 "10 de julho de 2025 às 19:00", "Av. Paulista, 1000", "Logo"):
        assert text in seen


def test_company_omitted_when_empty(monkeypatch, participant, event, cfg):
    participant["empresa"] = ""
    seen = _texts(monkeypatch)
    render_credential(participant, event, cfg)
    assert "" not in seen


def test_photo_and_qr(participant, event, cfg):
    photo = to_data_url(png_bytes((300, 200)), "image/png")
    with_qr = Image.open(io.BytesIO(render_credential(participant, event, cfg, photo)))
    cfg["show_qr"] = False
    without = Image.open(io.BytesIO(render_credential(participant, event, cfg, photo)))
    assert with_qr.height > without.height


def test_card_without_event(participant, cfg):
    assert render_credential(participant, None, cfg).startswith(b"\x89PNG")


def test_unreachable_logo_falls_back(participant, event, cfg):
    credential._LOGOS.clear()
    cfg["logo_url"] = "https://logo.invalid/logo.png"
    with patch("checkin.credential.requests.get", side_effect=requests.ConnectionError("dns")):
        assert credential.fetch_logo(cfg["logo_url"]) is None
        assert render_credential(participant, event, cfg).startswith(b"\x89PNG")
    credential._LOGOS.clear()


# ── PDF ──────────────────────────────────────────────────────────
def test_pdf_single_page_when_image_fits():
    offsets, h = pdf_offsets(720, 720)
    assert offsets == [10]
    assert h == pytest.approx(190)


def test_pdf_second_page_shifts_image_up():
    offsets, h = pdf_offsets(720, 1400)
    assert h == pytest.approx(1400 * 190 / 720)
    assert len(offsets) == 2
    assert offsets[1] == pytest.approx((h - 297) - h)


def test_pdf_exact_page_height_adds_page():
    offsets, h = pdf_offsets(190, 297, page_h_mm=297)
    assert len(offsets) == 2


def test_credential_pdf_pages():
    tall = png_bytes((720, 2000))
    pdf  = credential_pdf(tall)
    assert pdf.startswith(b"%PDF")
    assert b"/Count 2" in pdf
    assert b"/Count 1" in credential_pdf(png_bytes((720, 400)))


def test_export_name_replaces_each_whitespace():
    assert export_name("Ana Maria  Souza", "pdf") == "credencial_Ana_Maria__Souza.pdf"
    assert export_name("Ana", "png") == "credencial_Ana.png"


# ── Share ────────────────────────────────────────────────────────
def test_share_text_and_links(participant, event):
    text = share_text(participant, event)
    assert text == "Fiz check-in em Meetup Go #42! Participante: Ana Souza (3 participações)"
    links = share_links(text, "https://checkin.example")
    assert links["WhatsApp"].startswith("https://api.whatsapp.com/send?text=Fiz%20check-in")
    assert "%23" in links["X"]
    assert links["LinkedIn"].endswith("url=https%3A//checkin.example")


def test_share_widget_embeds_image():
    html = share_widget_html(b"\x89PNGdata", "credencial_Ana.png", 'diz "oi"')
    assert "navigator.share" in html
    assert "navigator.canShare" in html
    assert 'download="credencial_Ana.png"' in html
    assert '"diz \\"oi\\""' in html
    assert "base64,iVBOR2RhdGE=" in html


# ── Logo cache ───────────────────────────────────────────────────
def test_logo_retried_after_failure():
    credential._LOGOS.clear()
    url  = "https://logo.example/go.png"
    logo = png_bytes((96, 96))
    ok   = make_response(200)
    ok.content = logo
    with patch("checkin.credential.requests.get",
               side_effect=[requests.ConnectionError("dns"), ok]) as get:
        assert credential.fetch_logo(url) is None
        assert credential.fetch_logo(url) == logo
        assert credential.fetch_logo(url) == logo
    assert get.call_count == 2
    credential._LOGOS.clear()


# ── Card height ──────────────────────────────────────────────────
def test_card_grows_with_many_stars(participant, event, cfg):
    participant["eventos_participados"] = list(range(1000))
    tops = []

    def spy(draw, x, y, size, color):
        tops.append(y)
        draw_star(draw, x, y, size, color)

    with patch("checkin.credential.draw_star", side_effect=spy):
        img = Image.open(io.BytesIO(render_credential(participant, event, cfg)))
    assert len(tops) == 1000
    assert img.height > 4000
    assert max(tops) + credential.STAR < img.height - credential.PAD


def test_card_grows_with_long_name(participant, event, cfg):
    short = Image.open(io.BytesIO(render_credential(participant, event, cfg))).height
    participant["nome"] = " ".join(["Nome"] * 400)
    tall = Image.open(io.BytesIO(render_credential(participant, event, cfg)))
    assert tall.height > short + credential.CANVAS_H
    # the bottom of the card is painted, not transparent padding
    assert tall.getpixel((credential.W // 2, tall.height - 20))[3] == 255
