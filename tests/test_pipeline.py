import io

import pytest
from docx import Document

from docedit.config import EditorConfig
from docedit.docs import (
    DocumentTasks,
    export_document,
    import_document,
    markup_to_model,
    output_name,
    process_file,
)
from docedit.errors import ImportDecodeError
from docedit.walker import parse_markup


def _sample_docx() -> bytes:
    d = Document()
    d.add_heading("Report", 1)
    d.add_paragraph("Body text")
    buf = io.BytesIO()
    d.save(buf)
    return buf.getvalue()


def test_output_name():
    assert output_name("report.docx") == "edited-report.docx"
    assert output_name("/tmp/in/report.docx") == "edited-report.docx"
    assert output_name(None) == "document.docx"
    assert output_name("") == "document.docx"
    config = EditorConfig(output_prefix="v2-", default_output_name="untitled.docx")
    assert output_name("a.docx", config) == "v2-a.docx"
    assert output_name(None, config) == "untitled.docx"


def test_import_document_rejects_empty_data():
    with pytest.raises(ImportDecodeError):
        import_document(b"")


def test_export_then_import():
    data = export_document("<h1>Report</h1><p>Body text</p>")
    assert data[:2] == b"PK"
    markup = import_document(data)
    assert "<h1>Report</h1>" in markup
    assert "font-size: 11pt" in markup
    assert markup_to_model(markup).text == "ReportBody text"


def test_document_tasks_run_in_background():
    with DocumentTasks() as tasks:
        markup = tasks.submit_import(_sample_docx()).result()
        data = tasks.submit_export(markup).result()
    assert "<h1>Report</h1>" in markup
    assert data[:2] == b"PK"


def test_document_tasks_report_import_errors():
    with DocumentTasks() as tasks:
        future = tasks.submit_import(b"not a docx")
        with pytest.raises(ImportDecodeError):
            future.result()


def test_document_tasks_only_export_snapshots():
    with DocumentTasks() as tasks:
        with pytest.raises(TypeError):
            tasks.submit_export(parse_markup("<p>live</p>"))


def test_process_file_html(tmp_path):
    src = tmp_path / "notes.html"
    src.write_text("<h1>T</h1><p>x</p>", encoding="utf-8")
    result = process_file(str(src))
    assert result == {"docx": str(tmp_path / "edited-notes.docx")}
    d = Document(result["docx"])
    assert [p.style.name for p in d.paragraphs] == ["Heading 1", "Normal"]


def test_process_file_docx_with_markup_copy(tmp_path):
    src = tmp_path / "report.docx"
    src.write_bytes(_sample_docx())
    out = tmp_path / "out.docx"
    html = tmp_path / "report.html"
    result = process_file(str(src), out_path=str(out), html_path=str(html))
    assert result == {"html": str(html), "docx": str(out)}
    assert "<h1>Report</h1>" in html.read_text(encoding="utf-8")
    assert [p.text for p in Document(str(out)).paragraphs] == ["Report", "Body text"]


def test_process_file_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        process_file(str(tmp_path / "missing.docx"))
    other = tmp_path / "notes.txt"
    other.write_text("plain", encoding="utf-8")
    with pytest.raises(ValueError):
        process_file(str(other))
