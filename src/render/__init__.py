"""Render module for required sale price output display."""

from render.renderers import (
    BaseRenderer,
    ReportRenderer,
    SummaryRenderer,
    JsonRenderer,
    format_currency,
    format_percentage,
    to_jsonable,
    scenarios_to_dict,
    RENDERER_REGISTRY,
)

__all__ = [
    'BaseRenderer',
    'ReportRenderer',
    'SummaryRenderer',
    'JsonRenderer',
    'format_currency',
    'format_percentage',
    'to_jsonable',
    'scenarios_to_dict',
    'RENDERER_REGISTRY',
]
