import os, json, logging

logger = logging.getLogger(__name__)

# ══════════════════════════════════════════════════════════════════
#  FILE PATHS
# ══════════════════════════════════════════════════════════════════
CONFIG_FILE = os.environ.get("CHECKIN_CONFIG", "config.json")

# ══════════════════════════════════════════════════════════════════
#  CONFIG
# ══════════════════════════════════════════════════════════════════
CONFIG_DEFAULTS = {
    "api_url":            "http://localhost:8080",
    "logo_url":           "https://golang.sampa.br/img/golangsp01.png",
    "app_title":          "Checkin GolangSP",
    "default_bg_color":   "#1F2937",
    "default_text_color": "#FFFFFF",
    "timezone":           "America/Sao_Paulo",
    "request_timeout":    None,     # None = wait forever, like the browser fetch
    "show_qr":            True,
    "organizer_panel":    True,
    "app_url":            "",
}

def load_config(path: str = None) -> dict:
    """Defaults, updated with the saved config file and env overrides."""
    path = path or CONFIG_FILE
    out  = CONFIG_DEFAULTS.copy()
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                out.update(json.load(f))
        except (OSError, ValueError) as err:
            logger.warning("Config %s ilegível, usando padrões: %s", path, err)
    if os.environ.get("CHECKIN_API_URL"):
        out["api_url"] = os.environ["CHECKIN_API_URL"]
    out["api_url"] = out["api_url"].rstrip("/")
    return out

def save_config(cfg: dict, path: str = None):
    with open(path or CONFIG_FILE, "w", encoding="utf-8") as f:
        json.dump(cfg, f, ensure_ascii=False, indent=2)
