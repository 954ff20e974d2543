"""
Plot Export

Writes a rendered figure to a raster file sized for a named paper format.
Paper dimensions are converted from millimeters to pixels at the requested
DPI; text can be scaled so labels keep their proportion on large prints.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

import matplotlib.pyplot as plt
from matplotlib.legend import Legend
from matplotlib.text import Text

logger = logging.getLogger("cityviews")

MM_PER_INCH = 25.4

# Portrait (width, height) in millimeters
PAPER_SIZES_MM: dict[str, tuple[int, int]] = {
    "A0": (841, 1189),
    "A1": (594, 841),
    "A2": (420, 594),
    "A3": (297, 420),
    "A4": (210, 297),
    "A5": (148, 210),
    "A6": (105, 148),
    "A7": (74, 105),
    "A8": (52, 74),
    "A9": (37, 52),
    "A10": (26, 37),
    "B0": (1000, 1414),
    "B1": (707, 1000),
    "B2": (500, 707),
    "B3": (353, 500),
    "B4": (250, 353),
    "B5": (176, 250),
    "B6": (125, 176),
    "B7": (88, 125),
    "B8": (62, 88),
    "B9": (44, 62),
    "B10": (31, 44),
    "C4": (229, 324),
    "C5": (162, 229),
    "C6": (114, 162),
    "Letter": (216, 279),
    "Legal": (216, 356),
    "Tabloid": (279, 432),
    "Postcard": (100, 148),
    "Double Postcard": (148, 200),
    "Square Postcard": (120, 120),
}

ORIENTATIONS = ("portrait", "landscape")

# Raster formats written through matplotlib's Agg backend
EXPORT_FORMATS = ("png", "jpeg", "tiff")

# Relative text sizes applied on top of scale_factor
TITLE_SCALE = 1.2
LEGEND_TITLE_SCALE = 1.1


class ExportError(ValueError):
    """Raised for unsupported export parameters."""


def check_paper_size(paper_size: str) -> tuple[int, int]:
    if paper_size not in PAPER_SIZES_MM:
        raise ExportError(
            f"Unsupported paper size '{paper_size}'. "
            f"Available sizes: {', '.join(PAPER_SIZES_MM)}"
        )
    return PAPER_SIZES_MM[paper_size]


def check_orientation(orientation: str) -> None:
    if orientation not in ORIENTATIONS:
        raise ExportError(
            f"Unsupported orientation '{orientation}'. "
            f"Available orientations: {', '.join(ORIENTATIONS)}"
        )


def check_format(fmt: str) -> None:
    if fmt not in EXPORT_FORMATS:
        raise ExportError(
            f"Unsupported format '{fmt}'. "
            f"Available formats: {', '.join(EXPORT_FORMATS)}"
        )


def paper_dimensions_mm(
    paper_size: str,
    orientation: str = "portrait",
    keep_square: bool = True,
) -> tuple[float, float]:
    """(width, height) of the printed area in millimeters."""
    width_mm, height_mm = check_paper_size(paper_size)
    check_orientation(orientation)

    if orientation == "landscape":
        width_mm, height_mm = height_mm, width_mm

    if keep_square:
        side = min(width_mm, height_mm)
        width_mm, height_mm = side, side

    return width_mm, height_mm


def mm_to_px(mm: float, dpi: int) -> int:
    return int(round(mm * dpi / MM_PER_INCH))


def compute_dimensions(
    paper_size: str,
    orientation: str = "portrait",
    dpi: int = 300,
    keep_square: bool = True,
) -> tuple[int, int]:
    """
    Pixel size of a paper format at a given resolution.

    Args:
        paper_size: Key of PAPER_SIZES_MM, e.g. "A4" or "Letter"
        orientation: "portrait" or "landscape"
        dpi: Dots per inch
        keep_square: Use the shorter side for both width and height

    Returns:
        (width_px, height_px)
    """
    if dpi <= 0:
        raise ExportError(f"DPI must be positive, got {dpi}")
    width_mm, height_mm = paper_dimensions_mm(paper_size, orientation, keep_square)
    return mm_to_px(width_mm, dpi), mm_to_px(height_mm, dpi)


def _text_scale(text: Text, fig: plt.Figure) -> float:
    """Relative size for one text artist, by the role it plays in the figure."""
    if fig._suptitle is text:
        return TITLE_SCALE
    for ax in fig.axes:
        if text in (ax.title, ax._left_title, ax._right_title):
            return TITLE_SCALE
        legend = ax.get_legend()
        if legend is not None and text is legend.get_title():
            return LEGEND_TITLE_SCALE
    for legend in fig.legends:
        if text is legend.get_title():
            return LEGEND_TITLE_SCALE
    return 1.0


@contextmanager
def scaled_text(fig: plt.Figure, scale_factor: float) -> Iterator[None]:
    """
    Temporarily scale every text element of a figure.

    Body text, legend text, axis labels and tick labels scale by
    `scale_factor`, titles by 1.2x and legend titles by 1.1x of it.
    Original sizes are restored on exit.
    """
    if scale_factor == 1:
        yield
        return

    texts = [t for t in fig.findobj(Text) if t.get_text()]
    originals = [(t, t.get_fontsize()) for t in texts]
    # Tick labels are regenerated on draw, so scale them through the axes
    tick_sizes = []
    for ax in fig.axes:
        for axis in (ax.xaxis, ax.yaxis):
            major = axis.get_major_ticks()
            size = major[0].label1.get_fontsize() if major else None
            tick_sizes.append((axis, size))
            if size is not None:
                axis.set_tick_params(labelsize=size * scale_factor)
    try:
        for text, size in originals:
            text.set_fontsize(size * scale_factor * _text_scale(text, fig))
        yield
    finally:
        for text, size in originals:
            text.set_fontsize(size)
        for axis, size in tick_sizes:
            if size is not None:
                axis.set_tick_params(labelsize=size)


def export_scaled_plot(
    fig: plt.Figure,
    filename: Union[str, Path],
    paper_size: str = "A4",
    orientation: str = "portrait",
    format: str = "png",
    dpi: int = 300,
    keep_square: bool = True,
    scale_factor: float = 1,
) -> Path:
    """
    Export a figure to a raster file sized for a paper format.

    Args:
        fig: The rendered figure
        filename: Output path without extension; ".<format>" is appended
        paper_size: Key of PAPER_SIZES_MM (default: "A4")
        orientation: "portrait" (default) or "landscape"
        format: "png" (default), "jpeg" or "tiff"
        dpi: Resolution in dots per inch (default: 300)
        keep_square: Use the shorter paper side for both dimensions
        scale_factor: Multiplier for all text sizes (default: 1)

    Returns:
        Path of the written file

    Raises:
        ExportError: For an unsupported paper size, orientation or format,
            before anything is drawn
    """
    check_paper_size(paper_size)
    check_orientation(orientation)
    check_format(format)
    if scale_factor <= 0:
        raise ExportError(f"scale_factor must be positive, got {scale_factor}")

    width_px, height_px = compute_dimensions(paper_size, orientation, dpi, keep_square)
    output = Path(f"{filename}.{format}")
    output.parent.mkdir(parents=True, exist_ok=True)

    original_size = fig.get_size_inches().copy()
    logger.debug(
        "Exporting %s at %dx%d px (%s %s, %d dpi)",
        output, width_px, height_px, paper_size, orientation, dpi,
    )
    try:
        fig.set_size_inches(width_px / dpi, height_px / dpi)
        with scaled_text(fig, scale_factor):
            fig.savefig(
                output,
                format=format,
                dpi=dpi,
                facecolor=fig.get_facecolor(),
            )
    finally:
        fig.set_size_inches(original_size)

    logger.info("Plot exported successfully to %s (%dx%d px)", output, width_px, height_px)
    return output
