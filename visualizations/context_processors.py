"""Template context processors for the visualizations app."""

from __future__ import annotations

from django.http import HttpRequest

from .helpers import debugging


def gvis_debug(request: HttpRequest) -> dict[str, bool]:
    """Expose the visualization debug flag to all templates.

    Args:
        request: Current request object.

    Returns:
        Context dict with `gvis_debug` boolean.
    """

    return {"gvis_debug": debugging()}
