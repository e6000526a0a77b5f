"""Word (.docx) export of a generated reel script."""

from __future__ import annotations

import io
import re
from dataclasses import dataclass

from docx import Document
from docx.shared import Pt

from reel_studio.models import NewsItem, Script
from reel_studio.translations import t

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@dataclass(frozen=True)
class ExportedDocument:
    file_name: str
    data: bytes
    mime_type: str = DOCX_MIME


def _file_name_for(title: str) -> str:
    slug = re.sub(r"[^\w\-]+", "_", title, flags=re.UNICODE).strip("_")
    return f"{(slug or 'reel_script')[:60]}.docx"


def _labelled(document, label: str, text: str) -> None:
    heading = document.add_paragraph()
    run = heading.add_run(label)
    run.bold = True
    document.add_paragraph(text)


def export_script_to_docx(script: Script, news_item: NewsItem, language: str) -> ExportedDocument:
    """Render the script sections and suggestions into a downloadable document."""
    document = Document()
    document.styles["Normal"].font.size = Pt(11)

    document.add_heading(script.suggestions.title, level=0)
    based_on = document.add_paragraph()
    based_on.add_run(f'{t("basedOn", language)} "{news_item.headline}"').italic = True
    document.add_paragraph(f'{t("sourceTitle", language)}: {news_item.source} - {news_item.date}')

    document.add_heading(t("detailedScriptTitle", language), level=1)
    _labelled(document, t("hookTitle", language), script.detailed_script.hook)
    _labelled(document, t("developmentTitle", language), script.detailed_script.development)
    _labelled(document, t("ctaTitle", language), script.detailed_script.cta)

    document.add_heading(t("audioTextTitle", language), level=1)
    narration = document.add_paragraph()
    narration.add_run(script.clean_audio_text).italic = True

    document.add_heading(t("suggestionsTitle", language), level=1)
    _labelled(document, t("hashtagsTitle", language), " ".join(script.suggestions.hashtags))
    _labelled(document, t("thumbnailTitle", language), script.suggestions.thumbnail_idea)

    buffer = io.BytesIO()
    document.save(buffer)
    return ExportedDocument(file_name=_file_name_for(script.suggestions.title), data=buffer.getvalue())
