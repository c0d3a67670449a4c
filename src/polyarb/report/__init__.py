"""Report rendering - human-readable text and JSON."""

from polyarb.report.render import (
    format_usd,
    opportunities_to_json,
    render_opportunities_text,
    render_top_text,
    render_values_text,
    values_to_json,
)

__all__ = [
    "format_usd",
    "render_opportunities_text",
    "render_values_text",
    "render_top_text",
    "opportunities_to_json",
    "values_to_json",
]
