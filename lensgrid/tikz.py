"""Static TikZ rendering of a finished search."""

from __future__ import annotations

import math
from typing import List, Optional

from .classify import Relation
from .lens import LensField
from .search import SearchResult

PICTURE_WIDTH_CM = 8.0
LENS_MARK_RADIUS_PT = 1.6
# grid labels below this depth stay legible at PICTURE_WIDTH_CM
MAX_LABELLED_LEVEL = 6

standalone_tpl = r"""\documentclass[border=2pt,varwidth]{standalone}
\usepackage{tikz}
\tikzset{
  hit/.style={fill=black, draw=none},
  cell/.style={draw=gray!60, line width=0.2pt},
  source/.style={draw=red, line width=0.6pt},
  lens/.style={fill=orange},
  frame/.style={draw=black, line width=0.6pt},
  level/.style={font=\tiny, text=gray},
}
\pgfdeclarelayer{bg}\pgfdeclarelayer{fg}\pgfsetlayers{bg,main,fg}
\begin{document}
%s
%s
\end{document}
"""


def _format_float(value: float) -> str:
    if math.isnan(value) or math.isinf(value):
        raise ValueError("Cannot format non-finite float for TikZ output")
    formatted = f"{value:.4f}".rstrip("0").rstrip(".")
    if formatted in ("", "-0"):
        return "0"
    return formatted


def generate_tikz_code(
    result: SearchResult,
    lens_field: Optional[LensField] = None,
    *,
    show_grid: bool = False,
) -> str:
    """Draw hit regions, the source disk and lens positions in image-plane units.

    With ``show_grid`` every classified region is outlined and the shallow
    eliminated ones are labelled with their depth.
    """

    region = result.region
    scale = PICTURE_WIDTH_CM / region.size
    lines: List[str] = [f"\\begin{{tikzpicture}}[scale={_format_float(scale)}]"]

    if show_grid:
        lines.append("  \\begin{pgfonlayer}{bg}")
        for terminal in result.terminals:
            cell = terminal.region
            lines.append(
                "    \\draw[cell] ({x0}, {y0}) rectangle ({x1}, {y1});".format(
                    x0=_format_float(cell.x),
                    y0=_format_float(cell.y),
                    x1=_format_float(cell.x + cell.size),
                    y1=_format_float(cell.y + cell.size),
                )
            )
            if terminal.relation is Relation.NO_OVERLAP and terminal.level < MAX_LABELLED_LEVEL:
                center = cell.center
                lines.append(
                    "    \\node[level] at ({x}, {y}) {{{level}}};".format(
                        x=_format_float(center.x), y=_format_float(center.y), level=terminal.level
                    )
                )
        lines.append("  \\end{pgfonlayer}")

    lines.append("  \\begin{pgfonlayer}{main}")
    for terminal in result.hit_regions:
        cell = terminal.region
        lines.append(
            "    \\fill[hit] ({x0}, {y0}) rectangle ({x1}, {y1});".format(
                x0=_format_float(cell.x),
                y0=_format_float(cell.y),
                x1=_format_float(cell.x + cell.size),
                y1=_format_float(cell.y + cell.size),
            )
        )
    lines.append("  \\end{pgfonlayer}")

    lines.append("  \\begin{pgfonlayer}{fg}")
    source = result.source
    lines.append(
        "    \\draw[source] ({x}, {y}) circle ({r});".format(
            x=_format_float(source.origin.x),
            y=_format_float(source.origin.y),
            r=_format_float(source.radius),
        )
    )
    if lens_field is not None:
        for lens in lens_field.lenses:
            lines.append(
                "    \\fill[lens] ({x}, {y}) circle ({r}pt);".format(
                    x=_format_float(lens.origin.x),
                    y=_format_float(lens.origin.y),
                    r=_format_float(LENS_MARK_RADIUS_PT),
                )
            )
    lines.append(
        "    \\draw[frame] ({x0}, {y0}) rectangle ({x1}, {y1});".format(
            x0=_format_float(region.x),
            y0=_format_float(region.y),
            x1=_format_float(region.x + region.size),
            y1=_format_float(region.y + region.size),
        )
    )
    lines.append("  \\end{pgfonlayer}")
    lines.append("\\end{tikzpicture}")
    return "\n".join(lines)


def generate_tikz_document(
    result: SearchResult,
    lens_field: Optional[LensField] = None,
    *,
    title: Optional[str] = None,
    show_grid: bool = False,
) -> str:
    """Render a standalone LaTeX document around :func:`generate_tikz_code`."""

    header = ""
    if title:
        header = "\\noindent\\textbf{" + _escape(title.strip()) + "}\\par\\vspace{4pt}"
    return standalone_tpl % (header, generate_tikz_code(result, lens_field, show_grid=show_grid))


def _escape(text: str) -> str:
    repl = {
        "\\": r"\textbackslash{}",
        "&": r"\&",
        "%": r"\%",
        "#": r"\#",
        "_": r"\_",
        "{": r"\{",
        "}": r"\}",
        "$": r"\$",
        "~": r"\textasciitilde{}",
        "^": r"\textasciicircum{}",
    }
    return "".join(repl.get(c, c) for c in text)


__all__ = ["generate_tikz_code", "generate_tikz_document"]
