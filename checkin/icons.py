from PIL import ImageDraw

# Both icons live on a 24×24 grid
STAR_POINTS = [(12,2),(15.09,8.26),(22,9.27),(17,14.14),(18.18,21.02),
               (12,17.77),(5.82,21.02),(7,14.14),(2,9.27),(8.91,8.26)]

# ══════════════════════════════════════════════════════════════════
#  SVG  (page preview)
# ══════════════════════════════════════════════════════════════════
def profile_icon_svg(color, size=24) -> str:
    return (f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24" width="{size}" '
            f'height="{size}" fill="none" stroke="{color}" stroke-width="2" '
            f'stroke-linecap="round" stroke-linejoin="round">'
            f'<path d="M19 21v-2a4 4 0 0 0-4-4H9a4 4 0 0 0-4 4v2"></path>'
            f'<circle cx="12" cy="7" r="4"></circle></svg>')

def star_icon_svg(color, size=20) -> str:
    pts = " ".join(f"{x:g} {y:g}" for x, y in STAR_POINTS)
    return (f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24" width="{size}" '
            f'height="{size}" fill="{color}" stroke="{color}" stroke-width="2" '
            f'stroke-linecap="round" stroke-linejoin="round">'
            f'<polygon points="{pts}"></polygon></svg>')

# ══════════════════════════════════════════════════════════════════
#  PILLOW  (credential bitmap)
# ══════════════════════════════════════════════════════════════════
def draw_star(draw: ImageDraw.ImageDraw, x, y, size, color):
    """Filled star whose 24-unit box has its top-left corner at (x, y)."""
    s = size / 24
    draw.polygon([(x + px*s, y + py*s) for px, py in STAR_POINTS], fill=color, outline=color)

def draw_profile_icon(draw: ImageDraw.ImageDraw, cx, cy, size, color):
    """Outline head-and-shoulders icon centred on (cx, cy)."""
    s  = size / 24
    x0 = cx - size / 2; y0 = cy - size / 2
    w  = max(1, int(2 * s))
    draw.ellipse([x0 + 8*s, y0 + 3*s, x0 + 16*s, y0 + 11*s], outline=color, width=w)
    # shoulders: two short uprights joined by a rounded top
    draw.line([(x0 + 5*s, y0 + 21*s), (x0 + 5*s, y0 + 19*s)], fill=color, width=w)
    draw.line([(x0 + 19*s, y0 + 21*s), (x0 + 19*s, y0 + 19*s)], fill=color, width=w)
    draw.arc([x0 + 5*s, y0 + 15*s, x0 + 13*s, y0 + 23*s], 180, 270, fill=color, width=w)
    draw.arc([x0 + 11*s, y0 + 15*s, x0 + 19*s, y0 + 23*s], 270, 360, fill=color, width=w)
    draw.line([(x0 + 9*s, y0 + 15*s), (x0 + 15*s, y0 + 15*s)], fill=color, width=w)
