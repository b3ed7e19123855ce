import math

# ══════════════════════════════════════════════════════════════════
#  COLOR HELPERS
# ══════════════════════════════════════════════════════════════════
DEFAULT_BG   = "#1F2937"
DEFAULT_TEXT = "#FFFFFF"

def _round(c):
    # half rounds up, like Math.round
    return int(math.floor(c + 0.5))

def adjust_color(hex_color, percent):
    """Lighten (percent > 0) or darken (percent < 0) a #rrggbb color.

    Each channel becomes ``c + c*percent/100`` clamped to [0, 255].
    Anything that is not a 6-digit hex string comes back untouched.
    """
    if not hex_color or not isinstance(hex_color, str):
        return hex_color
    h = hex_color[1:] if hex_color.startswith("#") else hex_color
    try:
        rgb = [int(h[i:i+2], 16) for i in (0, 2, 4)]
    except ValueError:
        return hex_color
    out = [min(255, max(0, c + (c * percent / 100))) for c in rgb]
    return "#" + "".join(f"{_round(c):02x}" for c in out)

def hex_rgb(h, default=(0, 0, 0)) -> tuple:
    h = (h or "").lstrip("#")
    try:
        return (int(h[0:2],16), int(h[2:4],16), int(h[4:6],16))
    except ValueError:
        return default

def hex_rgba(h, a=255) -> tuple:
    return (*hex_rgb(h), a)

def palette(event=None, bg_default=DEFAULT_BG, text_default=DEFAULT_TEXT) -> dict:
    """Every tone the page and the credential derive from the event colors."""
    event = event or {}
    bg  = event.get("background_color") or bg_default
    txt = event.get("text_color") or text_default
    return {
        "bg":         bg,
        "text":       txt,
        "button":     adjust_color(bg, 20),
        "button_hov": adjust_color(bg, 30),
        "ring":       adjust_color(txt, -20),
        "border":     adjust_color(txt, -30),
        "shade":      adjust_color(bg, -15),
        "secondary":  adjust_color(bg, -10),
    }
