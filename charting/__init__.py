"""Chart data and script generation for the Google Visualization API.

This package holds the table model, option serializer, registry and script
emitter. It uses Django's escaping helpers but never touches settings, the
template engine or the request cycle.
"""

from .data_table import DataTable, ValidationError
from .registry import ChartRegistry
from .script import render_all

__all__ = ["ChartRegistry", "DataTable", "ValidationError", "render_all"]
