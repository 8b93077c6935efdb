"""
Stateless résumé analysis for simple mode (secondary chat provider, no database).
"""
from typing import Any, Dict, List

from jobmatch.helpers.parsing import EXTRACTORS, parse_json_object
from jobmatch.helpers.prompts import SIMPLE_ANALYZE_PROMPT
from jobmatch.utils.exceptions import ProcessingError
from jobmatch.utils.logging_config import get_logger
from jobmatch.utils.utils import ChatFn, nvidia_chat

logger = get_logger(__name__)

MIN_TEXT_LENGTH = 50

BASIC_SKILLS = [
    'JavaScript', 'Python', 'Java', 'C++', 'React', 'Node.js',
    'SQL', 'MongoDB', 'AWS', 'Docker', 'Kubernetes', 'Git',
    'TypeScript', 'Angular', 'Vue', 'Django', 'Flask', 'Spring',
    'Machine Learning', 'AI', 'Data Science', 'DevOps',
    'Agile', 'Scrum', 'REST API', 'GraphQL', 'CI/CD',
]


def basic_skills(text: str) -> List[str]:
    lower = text.lower()
    return [s for s in BASIC_SKILLS if s.lower() in lower]


def basic_analysis(text: str) -> Dict[str, Any]:
    return {
        "rawText": text,
        "skills": basic_skills(text),
        "experience": [],
        "education": [],
        "summary": text[:200] + "...",
    }


def analyze_resume(file_bytes: bytes, mime_type: str, chat: ChatFn = nvidia_chat) -> Dict[str, Any]:
    """Extract text and ask the model for a loose profile.

    Raises ProcessingError when the type is unsupported or the document has
    less than 50 characters of text. A non-JSON answer degrades to the basic
    keyword analysis; an upstream model error propagates.
    """
    extractor = EXTRACTORS.get(mime_type)
    if extractor is None:
        raise ProcessingError("Failed to parse resume: Unsupported file type")
    try:
        text = extractor(file_bytes) or ""
    except Exception as e:
        raise ProcessingError(f"Failed to parse resume: {e}", cause=e)

    if len(text.strip()) < MIN_TEXT_LENGTH:
        raise ProcessingError("Failed to parse resume: Could not extract text from resume")

    answer = chat(SIMPLE_ANALYZE_PROMPT.format(resume_text=text))
    data = parse_json_object(answer)
    if data is None:
        logger.warning("Simple analysis answer was not JSON, using basic analysis")
        data = basic_analysis(text)

    if not data.get("rawText"):
        data["rawText"] = text
    return data
