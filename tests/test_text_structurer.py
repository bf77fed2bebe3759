from __future__ import annotations

from overview.core import PlainTextStructurer


def test_blank_lines_split_paragraphs():
    assert PlainTextStructurer().structure("a\n\nb") == "<p>a</p><p>b</p>"


def test_single_newlines_become_line_breaks():
    assert PlainTextStructurer().structure("line one\nline two") == "<p>line one<br>line two</p>"


def test_empty_paragraphs_are_dropped():
    assert PlainTextStructurer().structure("\n\na\n \n\n\nb\n") == "<p>a</p><p>b</p>"
    assert PlainTextStructurer().structure("\n\n") == ""


def test_should_structure_only_plain_multiline_text():
    structurer = PlainTextStructurer()
    assert structurer.should_structure("a\nb")
    assert not structurer.should_structure("single line")
    assert not structurer.should_structure("<b>x</b>\ny")
    assert not structurer.should_structure("")
    assert not structurer.should_structure("\n \n")


def test_has_markup():
    structurer = PlainTextStructurer()
    assert structurer.has_markup("<br/>")
    assert not structurer.has_markup("a &lt; b")
