import base64
import io

import pytest
from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Pt

from docedit.config import EditorConfig
from docedit.docs import StyleMap, markup_to_model, read_docx, write_docx
from docedit.errors import ExportEncodeError, ImportDecodeError
from docedit.model import LINE_BREAK, Alignment, Block, BlockKind, DocumentModel, Run, StyleState

PNG_1X1 = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def _docx_bytes(d) -> bytes:
    buf = io.BytesIO()
    d.save(buf)
    return buf.getvalue()


def _read_back(data: bytes):
    return Document(io.BytesIO(data))


def _import(d, config=None) -> DocumentModel:
    return markup_to_model(read_docx(_docx_bytes(d), config), config)


# --- Serializer ---

def test_write_docx_maps_block_kinds_to_styles():
    model = DocumentModel([
        Block(BlockKind.HEADING1, [Run("Title", StyleState(font_size_half_points=48))]),
        Block(BlockKind.HEADING2, [Run("Sub", StyleState(font_size_half_points=36))]),
        Block(BlockKind.PARAGRAPH, [Run("Body")]),
        Block(BlockKind.BULLET_LIST_ITEM, [Run("dot")]),
        Block(BlockKind.NUMBERED_LIST_ITEM, [Run("one")]),
    ])
    paragraphs = _read_back(write_docx(model)).paragraphs
    assert [p.style.name for p in paragraphs] == ["Heading 1", "Heading 2", "Normal", "List Bullet", "List Number"]
    assert [p.text for p in paragraphs] == ["Title", "Sub", "Body", "dot", "one"]


def test_write_docx_run_formatting():
    model = DocumentModel([
        Block(BlockKind.PARAGRAPH, [
            Run("Hi ", StyleState(bold=True)),
            Run("there", StyleState(italic=True, underline=True, font_size_half_points=28)),
        ]),
    ])
    hi, there = _read_back(write_docx(model)).paragraphs[0].runs
    assert (hi.bold, hi.italic, hi.underline) == (True, None, None)
    assert hi.font.size == Pt(11)
    assert (there.bold, there.italic, there.underline) == (None, True, True)
    assert there.font.size == Pt(14)


def test_write_docx_alignment_and_default_font():
    model = DocumentModel([
        Block(BlockKind.PARAGRAPH, [Run("plain")]),
        Block(BlockKind.PARAGRAPH, [Run("a"), Run("b", StyleState(alignment=Alignment.CENTER))]),
    ])
    d = _read_back(write_docx(model, EditorConfig(default_font_family="Arial", default_font_size_pt=12)))
    assert [p.alignment for p in d.paragraphs] == [None, WD_ALIGN_PARAGRAPH.CENTER]
    normal = d.styles["Normal"]
    assert normal.font.name == "Arial"
    assert normal.font.size == Pt(12)


def test_write_docx_keeps_empty_blocks_and_line_breaks():
    model = DocumentModel([
        Block(BlockKind.PARAGRAPH, []),
        Block(BlockKind.PARAGRAPH, [Run("a" + LINE_BREAK + "b")]),
        Block(BlockKind.HEADING2, []),
    ])
    paragraphs = _read_back(write_docx(model)).paragraphs
    assert len(paragraphs) == 3
    assert paragraphs[1].text == "a\nb"
    assert len(paragraphs[1]._p.xpath(".//w:br")) == 1


def test_write_docx_source_newlines_are_not_breaks():
    paragraph = _read_back(write_docx(markup_to_model("<p>Hello\n world</p>"))).paragraphs[0]
    assert paragraph._p.xpath(".//w:br") == []
    assert paragraph.text == "Hello\n world"


def test_write_docx_br_becomes_one_break():
    paragraph = _read_back(write_docx(markup_to_model("<p>one<br>two</p>"))).paragraphs[0]
    assert len(paragraph._p.xpath(".//w:br")) == 1


def test_write_docx_aligns_empty_blocks():
    model = markup_to_model('<p style="text-align: center"></p><h2 style="text-align: right"></h2><p></p>')
    d = _read_back(write_docx(model))
    assert [p.alignment for p in d.paragraphs] == [WD_ALIGN_PARAGRAPH.CENTER, WD_ALIGN_PARAGRAPH.RIGHT, None]


def test_write_docx_rejects_unencodable_text():
    model = DocumentModel([Block(BlockKind.PARAGRAPH, [Run("bad\x01text")])])
    with pytest.raises(ExportEncodeError):
        write_docx(model)


# --- Importer ---

def test_read_docx_headings_and_runs():
    d = Document()
    d.add_heading("Title", 1)
    p = d.add_paragraph()
    p.add_run("Hi ").bold = True
    p.add_run("there")
    model = _import(d)
    assert [b.kind for b in model] == [BlockKind.HEADING1, BlockKind.PARAGRAPH]
    assert model.blocks[0].runs == [Run("Title", StyleState(font_size_half_points=48))]
    assert model.blocks[1].runs == [Run("Hi ", StyleState(bold=True)), Run("there", StyleState())]


def test_read_docx_lists():
    d = Document()
    d.add_paragraph("first", style="List Bullet")
    d.add_paragraph("second", style="List Bullet")
    d.add_paragraph("step", style="List Number")
    d.add_paragraph("after")
    markup = read_docx(_docx_bytes(d))
    assert "<ul><li>first</li><li>second</li></ul><ol><li>step</li></ol>" in markup
    kinds = [b.kind for b in markup_to_model(markup)]
    assert kinds == [
        BlockKind.BULLET_LIST_ITEM,
        BlockKind.BULLET_LIST_ITEM,
        BlockKind.NUMBERED_LIST_ITEM,
        BlockKind.PARAGRAPH,
    ]


def test_read_docx_run_properties_and_alignment():
    d = Document()
    p = d.add_paragraph()
    p.alignment = WD_ALIGN_PARAGRAPH.RIGHT
    r = p.add_run("big")
    r.font.size = Pt(14)
    r.italic = True
    p.add_run("under").underline = True
    runs = _import(d).blocks[0].runs
    assert runs[0] == Run("big", StyleState(italic=True, font_size_half_points=28, alignment=Alignment.RIGHT))
    assert runs[1] == Run("under", StyleState(underline=True, alignment=Alignment.RIGHT))


def test_read_docx_tables_become_blocks():
    d = Document()
    table = d.add_table(rows=1, cols=2)
    table.cell(0, 0).text = "left"
    table.cell(0, 1).text = "right"
    d.add_paragraph("below")
    markup = read_docx(_docx_bytes(d))
    assert "<table" in markup
    assert [b.text for b in markup_to_model(markup)] == ["left", "right", "below"]


def test_read_docx_embeds_images_as_data_uris():
    d = Document()
    d.add_picture(io.BytesIO(PNG_1X1))
    markup = read_docx(_docx_bytes(d))
    assert 'src="data:image/png;base64,' in markup


def test_read_docx_stylesheet_uses_config():
    d = Document()
    d.add_paragraph("x")
    markup = read_docx(_docx_bytes(d), EditorConfig(default_font_family="Georgia", default_font_size_pt=12))
    assert "font-family: Georgia" in markup
    assert "font-size: 12pt" in markup
    assert [b.text for b in markup_to_model(markup)] == ["x"]


def test_read_docx_custom_style_map():
    d = Document()
    d.add_heading("Big", 0)
    config = EditorConfig(style_map=[("title", BlockKind.HEADING1)])
    model = _import(d, config)
    assert model.blocks[0].kind is BlockKind.HEADING1


def test_read_docx_rejects_non_docx_bytes():
    with pytest.raises(ImportDecodeError):
        read_docx(b"this is not a zip archive")


def test_round_trip_keeps_kinds_and_text():
    model = markup_to_model(
        "<h1>T</h1><p><b>bold</b> text</p><ul><li>a</li></ul><ol><li>b</li></ol><h2>S</h2>"
    )
    again = _import(_read_back(write_docx(model)))
    assert [(b.kind, b.text) for b in again] == [(b.kind, b.text) for b in model]


def test_style_map_lookup():
    style_map = StyleMap([("Heading 1", BlockKind.HEADING1), ("heading 1", BlockKind.PARAGRAPH)])
    assert len(style_map) == 2
    assert style_map.lookup("  HEADING   1 ") is BlockKind.HEADING1
    assert style_map.lookup("Heading 3") is None
    assert style_map.lookup(None) is None
