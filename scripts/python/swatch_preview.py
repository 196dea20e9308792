from PIL import Image, ImageDraw


def render_preview(records, columns=8, swatch_size=64, padding=4):
    """Lay the swatches out row-major on a white sheet, one square per color."""
    if not records:
        return Image.new("RGB", (padding, padding), (255, 255, 255))

    columns = max(1, min(columns, len(records)))
    rows = (len(records) + columns - 1) // columns
    step = swatch_size + padding
    img = Image.new("RGB", (columns * step + padding, rows * step + padding), (255, 255, 255))
    draw = ImageDraw.Draw(img)

    for i, record in enumerate(records):
        row, col = divmod(i, columns)
        x, y = padding + col * step, padding + row * step
        fill = tuple(int(round(c * 255)) for c in record.display_rgb)
        draw.rectangle([x, y, x + swatch_size - 1, y + swatch_size - 1], fill=fill)
    return img


def save_preview(records, path, **kwargs):
    img = render_preview(records, **kwargs)
    img.save(path, "PNG")
    return path
