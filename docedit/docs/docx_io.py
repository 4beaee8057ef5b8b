from __future__ import annotations

import base64
import io
from typing import Dict, Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup, NavigableString, Tag
from docx import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml.ns import qn
from docx.shared import Pt
from docx.table import Table
from docx.text.hyperlink import Hyperlink
from docx.text.paragraph import Paragraph

from docedit.config import EditorConfig
from docedit.errors import ExportEncodeError, ImportDecodeError
from docedit.logger import get_logger
from docedit.model import LINE_BREAK, Alignment, Block, BlockKind, DocumentModel

from .style_map import StyleMap, list_kind_for_style

LOGGER = get_logger(__name__)

_KIND_TAGS = {
    BlockKind.PARAGRAPH: "p",
    BlockKind.HEADING1: "h1",
    BlockKind.HEADING2: "h2",
}
_LIST_TAGS = {
    BlockKind.BULLET_LIST_ITEM: "ul",
    BlockKind.NUMBERED_LIST_ITEM: "ol",
}
_KIND_STYLES = {
    BlockKind.PARAGRAPH: None,
    BlockKind.HEADING1: "Heading 1",
    BlockKind.HEADING2: "Heading 2",
    BlockKind.BULLET_LIST_ITEM: "List Bullet",
    BlockKind.NUMBERED_LIST_ITEM: "List Number",
}
_DOCX_ALIGNMENTS = {
    Alignment.LEFT: WD_ALIGN_PARAGRAPH.LEFT,
    Alignment.CENTER: WD_ALIGN_PARAGRAPH.CENTER,
    Alignment.RIGHT: WD_ALIGN_PARAGRAPH.RIGHT,
    Alignment.JUSTIFY: WD_ALIGN_PARAGRAPH.JUSTIFY,
}
_CSS_ALIGNMENTS = {v: k.value for k, v in _DOCX_ALIGNMENTS.items()}

_STYLESHEET = """
body {{ font-family: {family}, Arial, sans-serif; font-size: {size}pt; line-height: 1.15; }}
table {{ border-collapse: collapse; margin: 10pt 0; }}
td, th {{ border: 1px solid #ddd; padding: 4px; }}
h1 {{ font-size: {h1}pt; margin: {h1}pt 0; }}
h2 {{ font-size: {h2}pt; margin: {h2}pt 0; }}
"""


def _format_pt(value: float) -> str:
    return f"{value:g}"


def _extract_images_from_run(run) -> List[Tuple[bytes, str]]:
    """Return (bytes, content type) for every image embedded in this run."""
    images: List[Tuple[bytes, str]] = []
    for blip in run._r.xpath('.//a:blip'):
        rId = blip.get(qn('r:embed'))
        if not rId:
            continue
        try:
            part = run.part.related_parts[rId]
        except KeyError as e:
            raise ImportDecodeError(f"Embedded image {rId} cannot be read") from e
        images.append((part.blob, part.content_type))
    return images


def _numbering_formats(docx) -> Dict[Tuple[int, int], str]:
    """Map (numId, level) to the level's numFmt, e.g. (3, 0) → "bullet"."""
    formats: Dict[Tuple[int, int], str] = {}
    try:
        root = docx.part.numbering_part.element
    except (KeyError, NotImplementedError):
        return formats

    abstract_levels: Dict[str, Dict[int, str]] = {}
    for absnum in root.findall(qn("w:abstractNum")):
        levels: Dict[int, str] = {}
        for lvl in absnum.findall(qn("w:lvl")):
            fmt = lvl.find(qn("w:numFmt"))
            if fmt is not None and fmt.get(qn("w:val")):
                levels[int(lvl.get(qn("w:ilvl"), "0"))] = fmt.get(qn("w:val"))
        abstract_levels[absnum.get(qn("w:abstractNumId"))] = levels

    for num in root.findall(qn("w:num")):
        abs_elm = num.find(qn("w:abstractNumId"))
        if abs_elm is None or not num.get(qn("w:numId")):
            continue
        for ilvl, fmt in abstract_levels.get(abs_elm.get(qn("w:val")), {}).items():
            formats[(int(num.get(qn("w:numId"))), ilvl)] = fmt
    return formats


def _num_pr(paragraph: Paragraph):
    """Numbering properties on the paragraph, or inherited through its style chain."""
    pPr = paragraph._p.pPr
    if pPr is not None and pPr.numPr is not None:
        return pPr.numPr
    style = paragraph.style
    while style is not None:
        pPr = style.element.pPr
        if pPr is not None and pPr.numPr is not None:
            return pPr.numPr
        style = style.base_style
    return None


class _MarkupBuilder:
    """Render python-docx content into the editor's HTML markup."""

    def __init__(self, docx, config: EditorConfig) -> None:
        self._docx = docx
        self._config = config
        self._style_map = StyleMap.from_config(config)
        self._numbering = _numbering_formats(docx)
        self.soup = BeautifulSoup("", "html.parser")

    def build(self) -> str:
        sheet = self.soup.new_tag("style")
        sheet.string = _STYLESHEET.format(
            family=self._config.default_font_family,
            size=_format_pt(self._config.default_font_size_pt),
            h1=_format_pt(self._config.heading_sizes_pt.get(1, 24)),
            h2=_format_pt(self._config.heading_sizes_pt.get(2, 18)),
        )
        self.soup.append(sheet)
        self._render_blocks(self._docx.iter_inner_content(), self.soup)
        return str(self.soup)

    def _render_blocks(self, items: Iterable, parent: Tag) -> None:
        current_list: Optional[Tag] = None
        for item in items:
            if isinstance(item, Table):
                current_list = None
                parent.append(self._table(item))
                continue
            kind = self._classify(item)
            if kind.is_list_item:
                list_tag = _LIST_TAGS[kind]
                if current_list is None or current_list.name != list_tag:
                    current_list = self.soup.new_tag(list_tag)
                    parent.append(current_list)
                element = self.soup.new_tag("li")
                current_list.append(element)
            else:
                current_list = None
                element = self.soup.new_tag(_KIND_TAGS[kind])
                parent.append(element)
            self._paragraph(item, element, kind)

    def _classify(self, paragraph: Paragraph) -> BlockKind:
        style_name = paragraph.style.name if paragraph.style is not None else None
        kind = self._style_map.lookup(style_name)
        if kind is not None:
            return kind
        num_pr = _num_pr(paragraph)
        if num_pr is not None and num_pr.numId is not None and num_pr.numId.val:
            ilvl = num_pr.ilvl.val if num_pr.ilvl is not None else 0
            fmt = self._numbering.get((num_pr.numId.val, ilvl)) or self._numbering.get((num_pr.numId.val, 0))
            if fmt == "bullet":
                return BlockKind.BULLET_LIST_ITEM
            if fmt and fmt != "none":
                return BlockKind.NUMBERED_LIST_ITEM
            if fmt is None:
                LOGGER.warning("No numbering format for numId %s; falling back to the style name", num_pr.numId.val)
        return list_kind_for_style(style_name) or BlockKind.PARAGRAPH

    def _table(self, table: Table) -> Tag:
        element = self.soup.new_tag("table", attrs={"style": "border-collapse: collapse"})
        for row in table.rows:
            tr = self.soup.new_tag("tr")
            previous = None
            for cell in row.cells:
                # merged cells are reported once per grid column
                if previous is not None and cell._tc is previous._tc:
                    continue
                previous = cell
                td = self.soup.new_tag("td", attrs={"style": "border: 1px solid #ddd; padding: 4px"})
                self._render_blocks(cell.iter_inner_content(), td)
                tr.append(td)
            element.append(tr)
        return element

    def _paragraph(self, paragraph: Paragraph, element: Tag, kind: BlockKind) -> None:
        alignment = _CSS_ALIGNMENTS.get(paragraph.alignment)
        if alignment:
            element["style"] = f"text-align: {alignment}"
        for item in paragraph.iter_inner_content():
            if isinstance(item, Hyperlink):
                link = self.soup.new_tag("a")
                if item.url:
                    link["href"] = item.url
                for run in item.runs:
                    self._run(run, link, kind)
                element.append(link)
            else:
                self._run(item, element, kind)

    def _run(self, run, parent: Tag, kind: BlockKind) -> None:
        for blob, content_type in _extract_images_from_run(run):
            src = f"data:{content_type};base64,{base64.b64encode(blob).decode('ascii')}"
            parent.append(self.soup.new_tag("img", attrs={"src": src}))

        text = run.text
        if not text:
            return
        char_font = run.style.font if run.style is not None else None
        container = parent
        wrappers: List[Tag] = []
        if run.font.size is not None and not kind.is_heading:
            wrappers.append(self.soup.new_tag("span", attrs={"style": f"font-size: {_format_pt(run.font.size.pt)}pt"}))
        if run.bold or (run.bold is None and char_font is not None and char_font.bold):
            wrappers.append(self.soup.new_tag("strong"))
        if run.italic or (run.italic is None and char_font is not None and char_font.italic):
            wrappers.append(self.soup.new_tag("em"))
        if run.underline not in (None, False) or (run.underline is None and char_font is not None and char_font.underline):
            wrappers.append(self.soup.new_tag("u"))
        for wrapper in wrappers:
            container.append(wrapper)
            container = wrapper

        for idx, line in enumerate(text.split("\n")):
            if idx:
                container.append(self.soup.new_tag("br"))
            if line:
                container.append(NavigableString(line))


def read_docx(data: bytes, config: Optional[EditorConfig] = None) -> str:
    """Decode DOCX bytes into editor markup.

    Doxygen:
    - @param data: Complete DOCX file contents.
    - @param config: Style-mapping table and stylesheet defaults.
    - @return: HTML markup (stylesheet followed by block elements).
    - @throws ImportDecodeError: If the bytes are not a readable DOCX document.
    """
    config = config or EditorConfig()
    try:
        docx = DocxDocument(io.BytesIO(data))
    except Exception as e:
        raise ImportDecodeError(f"Not a readable DOCX document: {e}") from e
    try:
        return _MarkupBuilder(docx, config).build()
    except ImportDecodeError:
        raise
    except Exception as e:
        raise ImportDecodeError(f"DOCX content could not be decoded: {e}") from e


def _paragraph_alignment(block: Block) -> Optional[WD_ALIGN_PARAGRAPH]:
    # DOCX aligns whole paragraphs: the first run with an alignment decides,
    # then the container's own alignment
    for run in block.runs:
        if run.style.alignment is not Alignment.UNSET:
            return _DOCX_ALIGNMENTS[run.style.alignment]
    return _DOCX_ALIGNMENTS.get(block.alignment)


def _write_block(d, block: Block) -> None:
    p = d.add_paragraph(style=_KIND_STYLES[block.kind])
    alignment = _paragraph_alignment(block)
    if alignment is not None:
        p.alignment = alignment
    for run in block.runs:
        r = p.add_run()
        # add_text keeps source newlines as whitespace; only LINE_BREAK breaks
        for idx, part in enumerate(run.text.split(LINE_BREAK)):
            if idx:
                r.add_break()
            if part:
                r.add_text(part)
        if run.style.bold:
            r.bold = True
        if run.style.italic:
            r.italic = True
        if run.style.underline:
            r.underline = True
        r.font.size = Pt(run.style.font_size_pt)


def write_docx(model: DocumentModel, config: Optional[EditorConfig] = None) -> bytes:
    """Serialize a DocumentModel into DOCX bytes, one paragraph per block.

    Doxygen:
    - @param model: Blocks to write, in output order.
    - @param config: Supplies the document default font.
    - @return: Complete DOCX file contents.
    - @throws ExportEncodeError: If the document cannot be assembled; nothing is returned then.
    """
    config = config or EditorConfig()
    try:
        d = DocxDocument()
        normal = d.styles["Normal"]
        normal.font.name = config.default_font_family
        normal.font.size = Pt(config.default_font_size_pt)
        for block in model:
            _write_block(d, block)
        buf = io.BytesIO()
        d.save(buf)
    except Exception as e:
        raise ExportEncodeError(f"Could not assemble DOCX document: {e}") from e
    return buf.getvalue()
