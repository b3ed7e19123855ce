"""
╔══════════════════════════════════════════════════════════════════╗
║   Checkin GolangSP  v1.0                                         ║
║   Credencial de evento: cadastro, PDF e compartilhamento         ║
╠══════════════════════════════════════════════════════════════════╣
║   pip install -e .                                               ║
║   streamlit run app.py                                           ║
╚══════════════════════════════════════════════════════════════════╝
Backend esperado em CHECKIN_API_URL (padrão http://localhost:8080):
  GET  /events                      → último evento da lista
  POST /participants                → participante + eventos_participados
  GET  /events/<id>/participants    → painel do organizador
"""

import streamlit as st
import streamlit.components.v1 as components

from checkin import session
from checkin.api import CheckinClient
from checkin.colors import palette
from checkin.config import load_config
from checkin.credential import (export_name, share_text, share_links,
                                share_widget_html, participation_count)
from checkin.icons import profile_icon_svg, star_icon_svg
from checkin.logs import setup_logging
from checkin.photo import from_data_url
from checkin.report import participants_frame, build_excel, excel_name, XLSX_MIME

setup_logging()

# ══════════════════════════════════════════════════════════════════
#  LOAD CONFIG ON STARTUP
# ══════════════════════════════════════════════════════════════════
cfg    = load_config()
client = CheckinClient(cfg["api_url"], cfg["request_timeout"])

st.set_page_config(
    page_title=cfg["app_title"],
    page_icon="🪪",
    layout="centered",
    initial_sidebar_state="collapsed"
)

# ══════════════════════════════════════════════════════════════════
#  SESSION STATE
# ══════════════════════════════════════════════════════════════════
S = st.session_state
session.init_state(S)
session.load_latest_event(S, client)

pal = palette(S.event, cfg["default_bg_color"], cfg["default_text_color"])

# ══════════════════════════════════════════════════════════════════
#  CSS  (tones derived from the event colors)
# ══════════════════════════════════════════════════════════════════
st.markdown(f"""
<style>
.stApp{{background:{pal["bg"]};color:{pal["text"]};}}
.block-container{{background:rgba(31,41,55,.9);border-radius:16px;
    padding:2rem 2.2rem!important;margin-top:2rem;box-shadow:0 25px 50px rgba(0,0,0,.35);}}
h1{{color:#eceff1!important;text-align:center;font-weight:800!important;}}
h2,h3{{color:#eceff1!important;text-align:center;}}
label,.stTextInput label,.stFileUploader label{{color:#d1d5db!important;font-weight:600;}}
.stTextInput>div>div>input{{
    background:#374151!important;color:white!important;
    border:1.5px solid {pal["border"]}!important;border-radius:8px!important;
    font-size:1rem!important;}}
.stTextInput>div>div>input:focus{{
    border-color:{pal["ring"]}!important;box-shadow:0 0 0 2px {pal["ring"]}!important;}}
.stButton>button,.stDownloadButton>button{{
    width:100%;background:{pal["button"]}!important;color:{pal["text"]}!important;
    border:none!important;border-radius:10px!important;font-weight:bold!important;
    font-size:1rem!important;padding:.6rem 1.2rem!important;transition:all .2s!important;}}
.stButton>button:hover,.stDownloadButton>button:hover{{
    background:{pal["button_hov"]}!important;transform:scale(1.02)!important;}}
.stButton>button:disabled{{opacity:.5!important;cursor:not-allowed!important;}}
.avatar{{width:96px;height:96px;margin:0 auto;border-radius:50%;background:#374151;
    border:2px solid {pal["text"]};display:flex;align-items:center;justify-content:center;}}
.share a{{display:block;text-align:center;color:white;font-weight:bold;padding:.6rem;
    border-radius:10px;text-decoration:none;}}
</style>
""", unsafe_allow_html=True)

st.markdown(f"# {cfg['app_title']}")

# ══════════════════════════════════════════════════════════════════
#  BANNERS  (dismissible)
# ══════════════════════════════════════════════════════════════════
if S.error:
    b1, b2 = st.columns([12,1])
    with b1: st.error(S.error)
    with b2: st.button("✕", key="dismiss_error", on_click=session.dismiss_error, args=(S,))
if S.success:
    b1, b2 = st.columns([12,1])
    with b1: st.success(S.success)
    with b2: st.button("✕", key="dismiss_success", on_click=session.dismiss_success, args=(S,))

def _on_photo(key):
    session.select_photo(S, S.get(key))

# ══════════════════════════════════════════════════════════════════
#  FORM
# ══════════════════════════════════════════════════════════════════
if not S.participant:
    if not S.event:
        if not S.busy:
            st.warning(session.WAITING_EVENT)
    else:
        st.text_input("Nome Completo", key="nome", placeholder="Seu nome")
        st.text_input("E-mail", key="email", placeholder="seu.email@exemplo.com")
        st.text_input("Empresa (Opcional)", key="empresa", placeholder="Nome da sua empresa")

        ukey = f"photo_{S.uploader_key}"
        st.file_uploader("Foto de Perfil (Opcional)", key=ukey,
                         type=["png","jpg","jpeg","gif","webp","bmp"],
                         on_change=_on_photo, args=(ukey,))
        st.caption("Pré-visualização da Imagem:")
        if S.photo_data_url:
            _, mid, _ = st.columns([1,2,1])
            with mid: st.image(from_data_url(S.photo_data_url))
        else:
            st.markdown(f'<div class="avatar">{profile_icon_svg(pal["text"], 48)}</div>',
                        unsafe_allow_html=True)

        st.markdown("")
        if st.button("Gerar Minha Credencial", key="submit",
                     disabled=not session.can_register(S)):
            with st.spinner("Cadastrando..."):
                session.submit_registration(S, client, cfg)
            st.rerun()

# ══════════════════════════════════════════════════════════════════
#  CREDENTIAL
# ══════════════════════════════════════════════════════════════════
else:
    p     = S.participant
    nome  = p.get("nome","")
    st.markdown("## Sua Credencial")

    count = participation_count(p)
    if count:
        stars = "".join(star_icon_svg(pal["text"]) for _ in range(count))
        st.markdown(f'<p style="text-align:center;">Participações: {stars}</p>',
                    unsafe_allow_html=True)

    if S.credential_png:
        _, mid, _ = st.columns([1,4,1])
        with mid: st.image(S.credential_png)

        d1, d2 = st.columns(2)
        with d1:
            st.download_button("Baixar Credencial em PDF", data=S.credential_pdf,
                               file_name=export_name(nome, "pdf"), mime="application/pdf",
                               on_click=session.mark_downloaded, args=(S,))
        with d2:
            st.download_button("Baixar Imagem (PNG)", data=S.credential_png,
                               file_name=export_name(nome, "png"), mime="image/png")

        text = share_text(p, S.event)
        components.html(share_widget_html(S.credential_png, export_name(nome, "png"), text,
                                          pal["button"], pal["text"]), height=90)

        # Social share row
        links  = share_links(text, cfg.get("app_url",""))
        colors = {"WhatsApp":"#25D366", "LinkedIn":"#0A66C2", "X":"#111111"}
        cols   = st.columns(len(links))
        for col, (label, url) in zip(cols, links.items()):
            with col:
                st.markdown(f'<div class="share"><a href="{url}" target="_blank" '
                            f'style="background:{colors[label]};">{label}</a></div>',
                            unsafe_allow_html=True)
    else:
        if st.button("Gerar credencial novamente", key="retry"):
            with st.spinner("Gerando..."):
                session.render_exports(S, cfg)
            st.rerun()

    st.markdown("---")
    if st.button("Cadastrar Nova Credencial", key="new"):
        session.new_credential(S)
        st.rerun()

# ══════════════════════════════════════════════════════════════════
#  ORGANIZER PANEL  (sidebar)
# ══════════════════════════════════════════════════════════════════
if cfg.get("organizer_panel") and S.event:
    with st.sidebar:
        st.markdown("## 📋 Participantes do evento")
        st.caption(S.event.get("nome",""))
        if st.button("🔄 Carregar participantes", key="load_attendees"):
            session.load_attendees(S, client)
            st.rerun()
        if S.attendees is not None:
            df = participants_frame(S.attendees)
            st.metric("Total", len(df))
            st.dataframe(df, hide_index=True)
            st.download_button("📊 Excel", build_excel(S.attendees, S.event, cfg["timezone"]),
                               file_name=excel_name(S.event), mime=XLSX_MIME)
