import io
import json
import logging
from typing import Any, Optional

from pdfminer.high_level import extract_text as pdf_extract
from docx import Document

from jobmatch.config import PDF_MIME, DOCX_MIME

logging.getLogger("pdfminer").setLevel(logging.ERROR)


def read_pdf(data: bytes) -> str:
    return pdf_extract(io.BytesIO(data))


def read_docx(data: bytes) -> str:
    doc = Document(io.BytesIO(data))
    return "\n".join([p.text for p in doc.paragraphs])


EXTRACTORS = {
    PDF_MIME: read_pdf,
    DOCX_MIME: read_docx,
}


def first_json_object(s: str) -> Optional[str]:
    """Return the first balanced ``{...}`` substring of ``s``, honouring JSON strings."""
    start = s.find("{")
    if start < 0:
        return None
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(s)):
        ch = s[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return s[start:i + 1]
    return None


def parse_json_object(s: Optional[str]) -> Optional[dict]:
    """Parse an LLM answer into a dict.

    Tries the whole answer first, then the first balanced object embedded in
    surrounding prose. Returns None when neither yields a JSON object.
    """
    if not s:
        return None
    data: Any
    try:
        data = json.loads(s)
    except ValueError:
        candidate = first_json_object(s)
        if candidate is None:
            return None
        try:
            data = json.loads(candidate)
        except ValueError:
            return None
    return data if isinstance(data, dict) else None
