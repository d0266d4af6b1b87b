"""View helpers tying chart registration to the request cycle.

Charts are collected in a ChartRegistry stored on the current request (or on
the template Context when rendering without a request). The registry is
created by the first `{% visualization %}` tag and discarded once
`{% render_visualizations %}` has emitted the page script.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Final

from django.conf import settings
from django.http import HttpRequest
from django.template.context import BaseContext
from django.utils.html import format_html
from django.utils.safestring import SafeString, mark_safe

from charting.registry import ChartRegistry
from charting.script import render_all

from .conf import get_gvis_settings

logger = logging.getLogger(__name__)

REGISTRY_ATTRIBUTE: Final[str] = "_gvis_registry"
NO_CHARTS_COMMENT: Final[str] = "<!-- No graphs on this page /-->"

_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})


def _registry_state(target: HttpRequest | BaseContext) -> dict[str, Any]:
    """Return the mapping that holds the registry for this rendering context."""

    if isinstance(target, BaseContext):
        request = getattr(target, "request", None) or target.get("request")
        if request is None:
            # Copies made by `context.new()` share the bottom render-context dict.
            return target.render_context.dicts[0]
        target = request
    return vars(target)


def get_registry(target: HttpRequest | BaseContext, *, create: bool = False) -> ChartRegistry | None:
    """Return the registry for the current rendering context.

    Args:
        target: The current request, or a template Context.
        create: Create and attach a registry when none exists yet.

    Returns:
        The ChartRegistry, or None when no chart has been registered and
        `create` is False.
    """

    state = _registry_state(target)
    registry = state.get(REGISTRY_ATTRIBUTE)
    if registry is None and create:
        registry = ChartRegistry()
        state[REGISTRY_ATTRIBUTE] = registry
    return registry


def discard_registry(target: HttpRequest | BaseContext) -> None:
    """Drop the registry attached to the rendering context, if any."""

    _registry_state(target).pop(REGISTRY_ATTRIBUTE, None)


def debugging() -> bool:
    """Return True when debug placeholders should be rendered.

    `GVIS_DEBUG` wins when set. Otherwise a truthy `DEBUG` environment
    variable or `settings.DEBUG` enables debugging.
    """

    configured = get_gvis_settings().debug
    if configured is not None:
        return configured
    if os.getenv("DEBUG", "").strip().lower() in _TRUE_VALUES:
        return True
    return bool(settings.DEBUG)


def include_visualization_api(request: HttpRequest | None = None) -> SafeString:
    """Return the script tag that loads the visualization library.

    The request's scheme is reused so secure pages stay secure; without a
    request the loader is fetched over https.
    """

    scheme = request.scheme if request is not None and request.scheme else "https"
    return format_html('<script type="text/javascript" src="{}://{}"></script>', scheme, get_gvis_settings().api_url)


def render_visualizations(target: HttpRequest | BaseContext) -> SafeString:
    """Emit the script for every chart registered in this rendering context.

    Args:
        target: The current request, or a template Context.

    Returns:
        The script block; when no chart was registered, a placeholder comment in
        debug mode and an empty string otherwise.

    Raises:
        ValidationError: When a chart's rows do not match its columns.
    """

    registry = get_registry(target)
    try:
        output = render_all(registry, version=get_gvis_settings().api_version)
    finally:
        discard_registry(target)

    if output is None:
        logger.debug("No charts registered; nothing to render")
        return mark_safe(NO_CHARTS_COMMENT) if debugging() else mark_safe("")
    return mark_safe(output)
