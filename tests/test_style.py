import dataclasses

import pytest
from bs4 import BeautifulSoup

from docedit.model import Alignment, StyleDelta, StyleState, default_style, merge
from docedit.walker.markup import declared_style, parse_font_size, parse_style_attribute


def _tag(markup):
    return BeautifulSoup(markup, "html.parser").find()


def test_merge_local_true_wins_and_false_keeps_parent():
    parent = StyleState(bold=True)
    assert merge(parent, StyleDelta(bold=False)).bold is True
    assert merge(StyleState(), StyleDelta(italic=True)).italic is True
    assert merge(parent, StyleDelta()).bold is True


def test_merge_replaces_size_and_alignment_only_when_declared():
    parent = StyleState(font_size_half_points=30, alignment=Alignment.RIGHT)
    child = merge(parent, StyleDelta(font_size_half_points=20))
    assert child.font_size_half_points == 20
    assert child.alignment is Alignment.RIGHT
    assert merge(parent, StyleDelta(alignment=Alignment.CENTER)).alignment is Alignment.CENTER


def test_merge_never_mutates_parent():
    parent = default_style()
    child = merge(parent, StyleDelta(bold=True, font_size_half_points=40))
    assert parent == StyleState()
    assert child is not parent
    with pytest.raises(dataclasses.FrozenInstanceError):
        parent.bold = True


def test_with_font_size_forces_preset():
    style = StyleState(font_size_half_points=20)
    assert style.with_font_size(48).font_size_half_points == 48
    assert style.with_font_size(None) is style


def test_declared_style_from_tag_shortcuts():
    assert declared_style(_tag("<strong>x</strong>")).bold is True
    assert declared_style(_tag("<em>x</em>")).italic is True
    assert declared_style(_tag("<u>x</u>")).underline is True
    assert declared_style(_tag("<a href='#'>x</a>")).is_empty()


def test_declared_style_from_style_attribute():
    delta = declared_style(_tag('<span style="font-weight: 700; font-style: italic; font-size: 10.5pt">x</span>'))
    assert delta.bold is True
    assert delta.italic is True
    assert delta.font_size_half_points == 21

    delta = declared_style(_tag('<span style="text-decoration: underline line-through; text-align: end">x</span>'))
    assert delta.underline is True
    assert delta.alignment is Alignment.RIGHT


def test_declared_style_ignores_unrecognized_values():
    delta = declared_style(_tag('<span style="font-size: 12px; font-weight: normal; color: red">x</span>'))
    assert delta.is_empty()


def test_parse_helpers():
    assert parse_font_size("12pt") == 24
    assert parse_font_size(" 9 PT ") == 18
    assert parse_font_size("1.2em") is None
    assert parse_style_attribute("Font-Weight: bold;; color:") == {"font-weight": "bold"}
