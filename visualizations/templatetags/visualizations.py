"""Template tags for declaring charts and emitting the page script.

Usage::

    {% load visualizations %}
    {% include_visualization_api %}
    {% visualization "sales" "ColumnChart" data=rows columns=columns title="Sales" %}
    ...
    {% render_visualizations %}

`render_visualizations` must render after every `visualization` tag on the
page, typically just before `</body>`.
"""

from __future__ import annotations

from typing import Any

from django import template
from django.template.context import Context
from django.utils.safestring import SafeString

from visualizations import helpers

register = template.Library()


@register.simple_tag(takes_context=True)
def include_visualization_api(context: Context) -> SafeString:
    """Render the loader script tag for the visualization library."""

    return helpers.include_visualization_api(getattr(context, "request", None) or context.get("request"))


@register.simple_tag(takes_context=True)
def visualization(
    context: Context,
    chart_id: str,
    chart_type: str,
    options: dict[str, Any] | None = None,
    **kwargs: Any,
) -> SafeString:
    """Register a chart and render its placeholder element in place.

    Args:
        context: Template context holding the request.
        chart_id: Element id for the chart.
        chart_type: Library chart class, e.g. `PieChart`.
        options: Optional options mapping; keyword arguments are merged over it.
            The `data`, `columns`, `column_names` and `html` keys configure the
            table and element, `builder` is called with the DataTable, and
            everything else is passed to the chart as display options.

    Returns:
        The `<div>` the chart will be drawn into.
    """

    merged = {**(options or {}), **kwargs}
    builder = merged.pop("builder", None)
    registry = helpers.get_registry(context, create=True)
    return registry.register(chart_id, chart_type, merged, builder=builder).element.render()


@register.simple_tag(takes_context=True)
def render_visualizations(context: Context) -> SafeString:
    """Render the aggregate script for every chart registered so far."""

    return helpers.render_visualizations(context)
