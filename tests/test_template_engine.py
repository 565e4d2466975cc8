"""Test #placeholder# view rendering."""
import pytest

from core.engine.template_engine import TemplateEngine, TemplateNotFoundError, fmt_value, substitute


@pytest.fixture
def views(tmp_path):
    (tmp_path / "home.html").write_text(
        "<title>#title#</title><h1>#title#</h1><p>#message#</p>", encoding="utf-8"
    )
    (tmp_path / "notes.txt").write_text("not a view", encoding="utf-8")
    return tmp_path


def test_render_replaces_every_occurrence(views):
    engine = TemplateEngine(views)
    page = engine.render("home", {"title": "Home", "message": "Hello world!"})
    assert page == "<title>Home</title><h1>Home</h1><p>Hello world!</p>"


def test_render_escapes_html(views):
    engine = TemplateEngine(views)
    page = engine.render("home", {"title": "<b>", "message": "Tom & Jerry"})
    assert "&lt;b&gt;" in page
    assert "Tom &amp; Jerry" in page


def test_unknown_markers_are_kept(views):
    engine = TemplateEngine(views)
    page = engine.render("home", {"title": "Home"})
    assert "#message#" in page


def test_missing_view(views):
    engine = TemplateEngine(views)
    with pytest.raises(TemplateNotFoundError):
        engine.render("missing")


def test_views_are_cached(views):
    engine = TemplateEngine(views)
    engine.render("home")
    (views / "home.html").write_text("changed", encoding="utf-8")
    assert engine.render("home") != "changed"
    engine.clear_cache()
    assert engine.render("home") == "changed"


def test_list_views(views):
    assert TemplateEngine(views).list_views() == ["home"]


def test_fmt_value():
    assert fmt_value(None) == ""
    assert fmt_value(True) == "true"
    assert fmt_value(3.5) == "3.5"


def test_substitute_skips_containers():
    assert substitute("#tags#", {"tags": ["a", "b"]}) == "#tags#"
