"""Rendering subsystem for jsondelta."""

from deltapack.render.markup import (
    HIGHLIGHT_CLASSES,
    RenderContext,
    render,
    resolve_highlight,
)
from deltapack.render.report import render_dataset_report_html, render_pair_html

__all__ = [
    "HIGHLIGHT_CLASSES",
    "RenderContext",
    "render",
    "render_dataset_report_html",
    "render_pair_html",
    "resolve_highlight",
]
