"""Export of the rendered tree as a JPEG image or a single-page PDF."""

import logging
import math
import time
from dataclasses import replace
from pathlib import Path

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from PIL import Image
from reportlab.lib.pagesizes import landscape, portrait
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as pdf_canvas

from errors import ExportPreconditionError
from plotting import draw_scene
from scene import Scene, Viewport

logger = logging.getLogger(__name__)

PRODUCT_NAME = "VamshaVriksha"
EXPORT_PADDING = 50.0
# A power of two keeps width / dpi * dpi exact, so the image has the requested size.
EXPORT_DPI = 64
JPEG_QUALITY = 95
# Longest side of an exported raster; JPEG stops at 65535 pixels per side.
MAX_EXPORT_SIZE = 16384


def export_filename(extension: str, timestamp_ms: int | None = None) -> str:
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{PRODUCT_NAME}_{timestamp_ms}.{extension}"


def render_scene_image(
    scene: Scene | None, padding: float = EXPORT_PADDING, max_size: int | None = None
) -> Image.Image:
    """
    Rasterize the scene at one pixel per layout unit.

    The image covers the bounding box of the drawn cards plus ``padding`` on
    every side, whatever the current pan and zoom. Transparent regions are
    composited onto white. Trees whose longest side exceeds ``max_size``
    (``MAX_EXPORT_SIZE`` by default) are scaled down to fit.

    Raises:
        ExportPreconditionError: if there is nothing to draw.
    """
    bounds = scene.content_bounds() if scene is not None else None
    if bounds is None:
        raise ExportPreconditionError("No renderable scene to export")
    if max_size is None:
        max_size = MAX_EXPORT_SIZE

    left, top, right, bottom = bounds
    full_width = right - left + 2 * padding
    full_height = bottom - top + 2 * padding
    scale = min(1.0, max_size / max(full_width, full_height))
    if scale < 1.0:
        logger.info("Scaling export by %.3f to fit %d pixels", scale, max_size)
    width = min(max_size, math.ceil(full_width * scale))
    height = min(max_size, math.ceil(full_height * scale))

    fig = Figure(figsize=(width / EXPORT_DPI, height / EXPORT_DPI), dpi=EXPORT_DPI)
    canvas = FigureCanvasAgg(fig)
    fig.patch.set_alpha(0.0)
    ax = fig.add_axes((0, 0, 1, 1))

    framed = replace(
        scene,
        dimensions=(width, height),
        viewport=Viewport(tx=(padding - left) * scale, ty=(padding - top) * scale, k=scale),
        diagnostic=None,
    )
    draw_scene(ax, framed)
    canvas.draw()

    size = canvas.get_width_height()
    rendered = Image.frombuffer("RGBA", size, canvas.buffer_rgba(), "raw", "RGBA", 0, 1)
    background = Image.new("RGBA", size, "white")
    return Image.alpha_composite(background, rendered).convert("RGB")


def export_jpeg(scene: Scene | None, directory: Path | str = ".") -> Path | None:
    """Write the scene as ``VamshaVriksha_<millis>.jpg``; no-op without a scene."""
    try:
        image = render_scene_image(scene)
    except ExportPreconditionError as exc:
        logger.info("Skipping JPEG export: %s", exc)
        return None

    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename("jpg")
    try:
        image.save(path, format="JPEG", quality=JPEG_QUALITY)
    except (OSError, ValueError):
        logger.exception("Failed writing %s", path)
        path.unlink(missing_ok=True)
        return None
    logger.info("Tree image saved to %s", path)
    return path


def export_pdf(scene: Scene | None, directory: Path | str = ".") -> Path | None:
    """
    Write the scene as a one-page ``VamshaVriksha_<millis>.pdf``.

    The page has the image's pixel size, landscape when wider than tall and
    portrait otherwise, with the image drawn edge to edge.
    """
    try:
        image = render_scene_image(scene)
    except ExportPreconditionError as exc:
        logger.info("Skipping PDF export: %s", exc)
        return None

    width, height = image.size
    pagesize = landscape((width, height)) if width > height else portrait((width, height))

    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename("pdf")
    try:
        pdf = pdf_canvas.Canvas(str(path), pagesize=pagesize)
        pdf.drawImage(ImageReader(image), 0, 0, width=width, height=height)
        pdf.showPage()
        pdf.save()
    except (OSError, ValueError):
        logger.exception("Failed writing %s", path)
        path.unlink(missing_ok=True)
        return None
    logger.info("Tree document saved to %s", path)
    return path
