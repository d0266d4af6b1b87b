"""Integration tests for the visualization template tags and helpers."""

from __future__ import annotations

import pytest
from django.template import Context, Engine, RequestContext, Template

from visualizations import helpers
from visualizations.context_processors import gvis_debug

pytestmark = pytest.mark.integration


def _render(source: str, request, **context) -> str:
    template = Template("{% load visualizations %}" + source)
    return template.render(RequestContext(request, context))


def test_visualization_tag_outputs_div_immediately(rf) -> None:
    """The placeholder div renders where the tag appears."""

    request = rf.get("/")
    html = _render(
        '<p>{% visualization "my chart" "BarChart" data=rows html=attrs title="Sales" %}</p>',
        request,
        rows=[["2024", 1030]],
        attrs={"class": "chart"},
    )
    assert html == '<p><div id="my_chart" class="chart"><!-- /--></div></p>'
    registry = helpers.get_registry(request)
    assert registry is not None
    assert registry["my_chart"].options.keys() == ("title",)


def test_render_visualizations_emits_one_script_and_discards_registry(rf) -> None:
    """Two charts render in one script; the registry is dropped afterwards."""

    request = rf.get("/")
    html = _render(
        '{% visualization "pie" "PieChart" data=rows %}'
        '{% visualization "table" "Table" data=rows %}'
        "{% render_visualizations %}",
        request,
        rows=[["Mushrooms", 3]],
    )
    assert html.count("google.load(") == 1
    assert "{'packages':['corechart','table']}" in html
    assert html.count("chartData['pie'].addColumn(") == 2
    assert html.count("chartData['table'].addColumn(") == 2
    assert "new google.visualization.PieChart(document.getElementById('pie'))" in html
    assert html.endswith("</script><!-- Rendered Google Visualizations /-->")
    assert helpers.get_registry(request) is None


def test_options_mapping_and_keyword_options_are_merged(rf) -> None:
    """Keyword arguments are merged over an options mapping."""

    request = rf.get("/")
    html = _render(
        '{% visualization "c" "LineChart" options data=rows title="Override" %}{% render_visualizations %}',
        request,
        options={"title": "Original", "legend": {"position": "none"}},
        rows=[["a", 1]],
    )
    assert "{title: 'Override',legend: {position: 'none'}}" in html


def test_builder_callable_receives_table(rf) -> None:
    """A builder from the context is called with the DataTable."""

    def add_total(table) -> None:
        table.add_row(["Total", sum(row[1] for row in table.rows)])

    add_total.do_not_call_in_templates = True

    request = rf.get("/")
    html = _render(
        '{% visualization "visits" "ColumnChart" data=rows builder=add_total %}{% render_visualizations %}',
        request,
        rows=[["Mon", 1], ["Tue", 2]],
        add_total=add_total,
    )
    assert "[{v: 'Total'}, {v: 3}]" in html


def test_registry_falls_back_to_template_context_without_request() -> None:
    """Rendering without a request keeps the registry on the Context."""

    template = Template(
        '{% load visualizations %}{% visualization "c" "Table" data=rows %}{% render_visualizations %}'
    )
    html = template.render(Context({"rows": [["a"]]}))
    assert "chartData['c'] = new google.visualization.DataTable();" in html


def test_no_charts_renders_debug_comment_in_debug_mode(rf, settings) -> None:
    """With debugging on, an empty page gets a placeholder comment."""

    settings.GVIS_DEBUG = True
    assert _render("{% render_visualizations %}", rf.get("/")) == "<!-- No graphs on this page /-->"


def test_no_charts_renders_nothing_outside_debug_mode(rf, settings) -> None:
    """With debugging off, an empty page gets no output."""

    settings.GVIS_DEBUG = False
    assert _render("{% render_visualizations %}", rf.get("/")) == ""


def test_debugging_falls_back_to_environment_and_settings(settings, monkeypatch) -> None:
    """`DEBUG` in the environment or `settings.DEBUG` enable debugging."""

    settings.GVIS_DEBUG = None
    settings.DEBUG = False
    monkeypatch.delenv("DEBUG", raising=False)
    assert helpers.debugging() is False

    monkeypatch.setenv("DEBUG", "1")
    assert helpers.debugging() is True

    monkeypatch.delenv("DEBUG")
    settings.DEBUG = True
    assert helpers.debugging() is True


def test_gvis_debug_context_processor(rf, settings) -> None:
    """The context processor exposes the resolved debug flag."""

    settings.GVIS_DEBUG = False
    assert gvis_debug(rf.get("/")) == {"gvis_debug": False}


def test_include_visualization_api_uses_request_scheme(rf, settings) -> None:
    """The loader follows the request scheme and defaults to https."""

    settings.GVIS_API_URL = "www.google.com/jsapi"
    assert _render("{% include_visualization_api %}", rf.get("/")) == (
        '<script type="text/javascript" src="http://www.google.com/jsapi"></script>'
    )
    assert _render("{% include_visualization_api %}", rf.get("/", secure=True)) == (
        '<script type="text/javascript" src="https://www.google.com/jsapi"></script>'
    )
    assert helpers.include_visualization_api(None) == (
        '<script type="text/javascript" src="https://www.google.com/jsapi"></script>'
    )


def test_malformed_table_propagates_validation_error(rf) -> None:
    """A width mismatch aborts template rendering."""

    from charting.data_table import ValidationError

    request = rf.get("/")
    with pytest.raises(ValidationError):
        _render(
            '{% visualization "c" "Table" data=rows %}{% render_visualizations %}',
            request,
            rows=[["a", 1], ["b"]],
        )
    assert helpers.get_registry(request) is None


def _isolated_include_engine(inner: str) -> Engine:
    return Engine(
        loaders=[("django.template.loaders.locmem.Loader", {"inner.html": "{% load visualizations %}" + inner})],
        libraries={"visualizations": "visualizations.templatetags.visualizations"},
    )


def test_charts_registered_inside_isolated_include_are_rendered(rf) -> None:
    """Charts from an `include ... only` template reach the page script."""

    engine = _isolated_include_engine('{% visualization "inner" "Table" data=rows %}')
    template = engine.from_string(
        '{% load visualizations %}{% include "inner.html" with rows=rows only %}{% render_visualizations %}'
    )
    request = rf.get("/")
    html = template.render(RequestContext(request, {"rows": [["a", 1]]}))
    assert '<div id="inner"><!-- /--></div>' in html
    assert "chartData['inner'] = new google.visualization.DataTable();" in html
    assert helpers.get_registry(request) is None


def test_isolated_include_without_request_shares_the_registry() -> None:
    """Without a request, context copies still collect into one registry."""

    engine = _isolated_include_engine('{% visualization "inner" "Table" data=rows %}')
    template = engine.from_string(
        '{% load visualizations %}{% visualization "outer" "Table" data=rows %}'
        '{% include "inner.html" with rows=rows only %}{% render_visualizations %}'
    )
    html = template.render(Context({"rows": [["a", 1]]}))
    assert "chartData['outer'] = new google.visualization.DataTable();" in html
    assert "chartData['inner'] = new google.visualization.DataTable();" in html
    assert html.count('<script type="text/javascript">') == 1


def test_include_visualization_api_inside_isolated_include_uses_request_scheme(rf, settings) -> None:
    """The loader tag finds the request even when the include hides `request`."""

    settings.GVIS_API_URL = "www.google.com/jsapi"
    engine = _isolated_include_engine("{% include_visualization_api %}")
    template = engine.from_string('{% include "inner.html" only %}')
    html = template.render(RequestContext(rf.get("/"), {}))
    assert html == '<script type="text/javascript" src="http://www.google.com/jsapi"></script>'
