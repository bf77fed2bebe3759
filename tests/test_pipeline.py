from __future__ import annotations

import random
import re

import pytest

from overview.config import OverviewConfig
from overview.core import OverviewRenderer, render, visible_text_length


IMG = "[http://a.com/1.png]"
ROW = "{[http://a.com/1.jpg][http://a.com/2.jpg]}"


def _renderer(**overrides) -> OverviewRenderer:
    return OverviewRenderer(OverviewConfig(**overrides))


def _strip_ids(markup: str) -> str:
    return re.sub(r' id="[^"]*"', "", markup)


def test_image_row_between_text():
    result = _renderer().render("Hello " + ROW + " world")
    assert result.markup.startswith("Hello <div")
    assert result.markup.endswith("</div> world")
    assert result.markup.count('class="ai-image-row"') == 1
    assert result.markup.count("<img") == 2
    assert result.image_count == 2
    assert len(result.container_ids) == 1
    assert f'id="{result.container_ids[0]}"' in result.markup
    assert not result.was_truncated


@pytest.mark.parametrize(
    "raw",
    [
        "&#123;[http://a.com/1.jpg][http://a.com/2.jpg]&#125;",
        "&lbrace;[http://a.com/1.jpg][http://a.com/2.jpg]&rbrace;",
    ],
)
def test_brace_variants_render_the_same(raw):
    renderer = _renderer()
    assert _strip_ids(renderer.render(raw).markup) == _strip_ids(renderer.render(ROW).markup)


@pytest.mark.parametrize("raw", ["[not-a-url]", "{[not-a-url]}", "{[ftp://a.com/x.png]}"])
def test_malformed_notation_stays_literal(raw):
    result = _renderer().render(raw)
    assert result.markup == raw
    assert result.image_count == 0


def test_script_is_removed_entirely():
    assert _renderer().render("<script>alert(1)</script>Hello").markup == "Hello"


def test_render_is_deterministic():
    raw = "<p>Intro</p>" + ROW + "<p>Outro " + IMG + "</p>"
    assert _renderer().render(raw) == _renderer().render(raw)


def test_long_text_truncates_to_budget():
    result = _renderer().render_truncated("a" * 1000, 750)
    assert result.was_truncated
    assert result.markup == "a" * 750
    assert result.visible_length == 750


def test_short_text_is_not_truncated():
    result = _renderer().render_truncated("short", 750)
    assert not result.was_truncated
    assert result.markup == "short"


def test_content_after_cut_is_omitted():
    raw = "x" * 100 + IMG + "y" * 100
    result = _renderer().render_truncated(raw, 50)
    assert result.was_truncated
    assert result.markup == "x" * 50
    assert result.image_count == 0


def test_images_before_cut_survive_truncation():
    raw = "x" * 10 + IMG + "y" * 100
    result = _renderer().render_truncated(raw, 50)
    assert result.was_truncated
    assert "<img" in result.markup
    assert result.image_count == 1
    assert visible_text_length(result.markup) == 50


def test_expanded_matches_full_render():
    renderer = _renderer()
    raw = "z" * 900 + ROW
    assert renderer.render_truncated(raw, 10, expanded=True) == renderer.render(raw)


@pytest.mark.parametrize("raw", [None, ""])
def test_empty_input_renders_empty(raw):
    renderer = _renderer()
    assert renderer.render(raw).markup == ""
    result = renderer.render_truncated(raw, 10)
    assert result.markup == ""
    assert not result.was_truncated


@pytest.mark.parametrize("budget", [0, 1, 5, 17, 50])
def test_truncated_output_never_exceeds_budget(budget):
    raw = (
        "<p>Tom &amp; Jerry <b>chase</b> each other</p>"
        + ROW
        + "<ul><li>first &lt;item&gt;</li><li>second item</li></ul>"
        + IMG
        + "<p>closing words that keep going on</p>"
    )
    result = _renderer().render_truncated(raw, budget)
    assert result.was_truncated
    assert visible_text_length(result.markup) <= budget


def test_cut_after_entity_keeps_entity_whole():
    result = _renderer().render_truncated("Tom &amp; Jerry", 5)
    assert result.markup == "Tom &amp;"


def test_plain_text_lines_are_structured():
    result = _renderer().render("First line\nsecond\n\nNext para")
    assert result.markup == "<p>First line<br>second</p><p>Next para</p>"


def test_markup_is_not_structured():
    assert _renderer().render("<b>x</b>\ny").markup == "<b>x</b>\ny"


def test_custom_highlight_color():
    result = _renderer(highlight_color="#ffeeaa").render('<span style="background-color: yellow">x</span>')
    assert result.markup == '<span style="background-color: #ffeeaa">x</span>'


def test_platform_artifacts_kept_when_disabled():
    result = _renderer(strip_platform_artifacts=False).render('<div class="LGOjhe">t</div>')
    assert 'class="LGOjhe"' in result.markup


def test_container_ids_match_between_collapsed_and_full():
    renderer = _renderer()
    raw = "Intro " + ROW + " " + "z" * 100
    full = renderer.render(raw)
    collapsed = renderer.render_truncated(raw, 10)
    assert collapsed.was_truncated
    assert collapsed.container_ids == full.container_ids


def test_unusable_budget_shows_full_content():
    renderer = _renderer()
    raw = "a" * 100
    result = renderer.render_truncated(raw, "abc")
    assert not result.was_truncated
    assert result.markup == raw


def test_negative_budget_is_treated_as_zero():
    result = _renderer().render_truncated("Hello world", -3)
    assert result.was_truncated
    assert result.markup == ""


def test_default_budget_comes_from_config():
    result = _renderer(truncation_budget=3).render_truncated("abcdef")
    assert result.markup == "abc"


def test_results_are_memoized():
    renderer = _renderer()
    assert renderer.render("memo") is renderer.render("memo")
    assert renderer.render_truncated("a" * 20, 5) is renderer.render_truncated("a" * 20, 5)
    renderer.clear_cache()
    assert renderer.render("memo").markup == "memo"


def test_cache_can_be_disabled():
    renderer = _renderer(cache_size=0)
    first = renderer.render("no cache")
    assert first == renderer.render("no cache")
    assert first is not renderer.render("no cache")


def test_render_failure_falls_back_to_escaped_text(monkeypatch):
    renderer = _renderer()

    def boom(content):
        raise RuntimeError("broken")

    monkeypatch.setattr(renderer._sanitizer, "sanitize", boom)
    result = renderer.render("<b>x</b>")
    assert result.markup == "&lt;b&gt;x&lt;/b&gt;"


def test_truncation_failure_falls_back_to_full_content(monkeypatch):
    renderer = _renderer()

    def boom(raw, budget):
        raise RuntimeError("broken")

    monkeypatch.setattr(renderer._truncator, "truncate", boom)
    result = renderer.render_truncated("a" * 100, 10)
    assert not result.was_truncated
    assert result.markup == "a" * 100


def test_module_level_render(monkeypatch):
    for name in (
        "OVERVIEW_CONFIG_FILE",
        "OVERVIEW_TRUNCATION_BUDGET",
        "OVERVIEW_STRIP_PASTE_ARTIFACTS",
        "OVERVIEW_HIGHLIGHT_COLOR",
        "OVERVIEW_CACHE_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)
    assert render("Hello") == "Hello"


@pytest.mark.parametrize(
    "raw, budget",
    [
        ("x<y &nbsp;a < b ", 11),
        ("a<b\n\n&<script>var a=1</script>", 7),
        ("5 < 6 &amp; 7 &lt; 8 &nbsp;&nbsp; done", 9),
        ("&nbsp;<" * 10, 4),
    ],
)
def test_dangling_angle_brackets_still_fit_budget(raw, budget):
    result = _renderer().render_truncated(raw, budget)
    assert result.was_truncated
    assert visible_text_length(result.markup) <= budget
    assert result.visible_length == visible_text_length(result.markup)


def test_budget_holds_for_random_pastes():
    pieces = [
        "x<y", " a < b ", "&nbsp;", "&amp;", "& ", "&foo;", "plain words ", "\n\n",
        "<b>bold</b>", "<p>", "</p>", "<script>var a=1</script>", IMG, ROW,
        "[oops]", "&#123;", "<br>", "&lt;tag&gt;",
    ]
    rng = random.Random(20240601)
    renderer = _renderer()

    for _ in range(300):
        raw = "".join(rng.choice(pieces) for _ in range(rng.randint(1, 12)))
        budget = rng.randint(0, 30)
        result = renderer.render_truncated(raw, budget)
        assert visible_text_length(result.markup) <= budget, (raw, budget, result.markup)
