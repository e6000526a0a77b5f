"""Word export tests."""

import io

from docx import Document

from conftest import make_news, make_script
from reel_studio.export import DOCX_MIME, _file_name_for, export_script_to_docx
from reel_studio.translations import t


def test_export_contains_every_section():
    item = make_news(1)[0]
    document = export_script_to_docx(make_script(), item, "en")

    assert document.mime_type == DOCX_MIME
    assert document.file_name == "Rates_Are_Falling.docx"

    text = "\n".join(p.text for p in Document(io.BytesIO(document.data)).paragraphs)
    assert "Rates Are Falling" in text
    assert 'Headline 1' in text
    for key in ("detailedScriptTitle", "hookTitle", "ctaTitle", "audioTextTitle", "hashtagsTitle"):
        assert t(key, "en") in text
    assert "#realestate #mortgage #homebuying" in text
    assert "Agent pointing at a falling arrow chart" in text


def test_headings_follow_language():
    document = export_script_to_docx(make_script(), make_news(1)[0], "pt")
    text = "\n".join(p.text for p in Document(io.BytesIO(document.data)).paragraphs)
    assert t("suggestionsTitle", "pt") in text


def test_file_name_is_a_safe_slug():
    assert _file_name_for("¿Tasas / bajan?") == "Tasas_bajan.docx"
    assert _file_name_for("???") == "reel_script.docx"
    assert len(_file_name_for("x" * 200)) == 60 + len(".docx")
