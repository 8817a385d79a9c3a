from __future__ import annotations
import io
import re
import fitz  # pymupdf
from docx import Document

from cv_onion.core import DOCX, PDF, TEXT_PLAIN
from cv_onion.exceptions import TextExtractionError

def _clean_text(t: str) -> str:
    t = t.replace("\x00", " ")
    t = re.sub(r"[ \t]+", " ", t)
    t = re.sub(r"\n{3,}", "\n\n", t)
    return t.strip()

def extract_text_from_plain(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")

def extract_text_from_pdf(data: bytes) -> str:
    with fitz.open(stream=data, filetype="pdf") as doc:
        chunks = [page.get_text("text") for page in doc]
    return _clean_text("\n".join(chunks))

def extract_text_from_docx(data: bytes) -> str:
    doc = Document(io.BytesIO(data))
    parts = []
    for p in doc.paragraphs:
        parts.append(p.text)
    # include tables (basic)
    for table in doc.tables:
        for row in table.rows:
            parts.append(" | ".join(cell.text.strip() for cell in row.cells))
    return _clean_text("\n".join(parts))

_EXTRACTORS = {
    TEXT_PLAIN: extract_text_from_plain,
    PDF: extract_text_from_pdf,
    DOCX: extract_text_from_docx,
}

def extract_text(data: bytes, content_type: str) -> str:
    """
    Plain text from an uploaded CV. Legacy .doc is not supported; corrupt
    documents raise TextExtractionError too.
    """
    extractor = _EXTRACTORS.get((content_type or "").split(";")[0].strip().lower())
    if extractor is None:
        raise TextExtractionError(f"Cannot extract text from {content_type or 'unknown'} files")
    try:
        return extractor(data)
    except Exception as e:
        raise TextExtractionError(f"Could not read {content_type} document: {e}") from e
