"""
Résumé parsing pipeline.

check_type -> extract -> empty_check -> ai_extract -> (validate | fallback)

The first three stages stop the graph with an ``error``. From ai_extract on
the pipeline always produces a profile: either the cleaned AI answer or the
regex fallback, which is a degraded success and carries no error.
"""
import re
from typing import Any, Callable, Dict, List, Optional, TypedDict

from langgraph.graph import StateGraph, END

from jobmatch.helpers.parsing import EXTRACTORS, parse_json_object
from jobmatch.helpers.prompts import EXTRACT_PROMPT, PARSER_SYSTEM_PROMPT
from jobmatch.models.models import ParseResult
from jobmatch.models.schemas import ContactInfo, Education, ParsedProfile, WorkExperience
from jobmatch.utils.logging_config import get_logger
from jobmatch.utils.utils import groq_chat

logger = get_logger(__name__)

UNSUPPORTED_TYPE = "Unsupported file type"
NO_TEXT = "No text content found in file"

EXPECTED_KEYS = ("contact_info", "skills", "experience", "education", "summary")

COMMON_SKILLS = [
    'JavaScript', 'Python', 'Java', 'TypeScript', 'C++', 'C#', 'Go', 'Rust',
    'React', 'Angular', 'Vue', 'Node.js', 'Express', 'Next.js',
    'HTML', 'CSS', 'SCSS', 'Tailwind',
    'PostgreSQL', 'MySQL', 'MongoDB', 'Redis',
    'AWS', 'Google Cloud', 'Azure', 'Docker', 'Kubernetes',
    'Git', 'CI/CD', 'Jenkins', 'Linux',
    'Machine Learning', 'TensorFlow', 'PyTorch', 'Pandas', 'NumPy',
]

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_RE = re.compile(r"(?:\+?\d{1,3}[\s.-]?)?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}")
LINKEDIN_RE = re.compile(r"linkedin\.com/in/[\w\-]+")
GITHUB_RE = re.compile(r"github\.com/[\w\-]+")


class ParserState(TypedDict, total=False):
    file_bytes: bytes
    mime_type: str
    chat: Callable[..., str]
    raw_text: str
    ai_data: Optional[dict]
    parsed_data: ParsedProfile
    source: str
    error: Optional[str]


# ---------- cleanup helpers ----------

def _text(x: Any) -> Optional[str]:
    if x is None or isinstance(x, (dict, list)):
        return None
    s = str(x).strip()
    return s or None


def _string_list(x: Any) -> List[str]:
    if not isinstance(x, list):
        return []
    return [s.strip() for s in x if isinstance(s, str) and s.strip()]


def validate_and_clean(data: Dict[str, Any]) -> ParsedProfile:
    """Normalise an AI answer into a ParsedProfile, filling required defaults."""
    contact = data.get("contact_info")
    if not isinstance(contact, dict):
        contact = {}

    raw_experience = data.get("experience")
    experience = []
    for exp in raw_experience if isinstance(raw_experience, list) else []:
        if not isinstance(exp, dict):
            continue
        experience.append(WorkExperience(
            company=_text(exp.get("company")) or "Unknown Company",
            position=_text(exp.get("position")) or "Unknown Position",
            start_date=_text(exp.get("start_date")),
            end_date=_text(exp.get("end_date")),
            description=_text(exp.get("description")),
            skills_used=_string_list(exp.get("skills_used")),
        ))

    raw_education = data.get("education")
    education = []
    for edu in raw_education if isinstance(raw_education, list) else []:
        if not isinstance(edu, dict):
            continue
        education.append(Education(
            institution=_text(edu.get("institution")) or "Unknown Institution",
            degree=_text(edu.get("degree")) or "Unknown Degree",
            field_of_study=_text(edu.get("field_of_study")),
            graduation_date=_text(edu.get("graduation_date")),
        ))

    return ParsedProfile(
        contact_info=ContactInfo(**{k: _text(contact.get(k)) for k in ContactInfo.model_fields}),
        skills=_string_list(data.get("skills")),
        experience=experience,
        education=education,
        summary=_text(data.get("summary")),
    )


def extract_contact_info(text: str) -> ContactInfo:
    email = EMAIL_RE.search(text)
    phone = PHONE_RE.search(text)
    linkedin = LINKEDIN_RE.search(text)
    github = GITHUB_RE.search(text)
    lines = [line.strip() for line in text.split("\n") if line.strip()]

    return ContactInfo(
        name=lines[0] if lines else None,
        email=email.group(0) if email else None,
        phone=phone.group(0).strip() if phone else None,
        location=None,
        linkedin=f"https://{linkedin.group(0)}" if linkedin else None,
        github=f"https://{github.group(0)}" if github else None,
    )


def extract_skills_basic(text: str, vocabulary: List[str] = COMMON_SKILLS) -> List[str]:
    lowered = text.lower()
    return [skill for skill in vocabulary if skill.lower() in lowered]


def fallback_parse(text: str) -> ParsedProfile:
    return ParsedProfile(
        contact_info=extract_contact_info(text),
        skills=extract_skills_basic(text),
        experience=[],
        education=[],
        summary=None,
    )


def _has_expected_shape(data: Optional[dict]) -> bool:
    return isinstance(data, dict) and any(k in data for k in EXPECTED_KEYS)


# ---------- graph nodes ----------

def node_check_type(state: ParserState):
    if state.get("mime_type") not in EXTRACTORS:
        return {"error": UNSUPPORTED_TYPE}
    return {}


def node_extract(state: ParserState):
    extractor = EXTRACTORS[state["mime_type"]]
    try:
        text = extractor(state.get("file_bytes") or b"")
    except Exception as e:
        logger.warning(f"Text extraction failed for {state['mime_type']}: {e}")
        return {"error": str(e) or e.__class__.__name__}
    return {"raw_text": text or ""}


def node_empty_check(state: ParserState):
    text = (state.get("raw_text") or "").strip()
    if not text:
        return {"error": NO_TEXT, "raw_text": ""}
    return {"raw_text": text}


def node_ai_extract(state: ParserState):
    chat = state.get("chat") or groq_chat
    prompt = EXTRACT_PROMPT.format(resume_text=state["raw_text"])
    try:
        answer = chat(prompt, system=PARSER_SYSTEM_PROMPT)
    except Exception as e:
        logger.warning(f"AI resume extraction failed, falling back to regex parsing: {e}")
        return {"ai_data": None}

    data = parse_json_object(answer)
    if not _has_expected_shape(data):
        logger.warning("AI resume extraction returned no usable JSON, falling back to regex parsing")
        return {"ai_data": None}
    return {"ai_data": data}


def node_validate(state: ParserState):
    return {"parsed_data": validate_and_clean(state["ai_data"]), "source": "ai"}


def node_fallback(state: ParserState):
    return {"parsed_data": fallback_parse(state["raw_text"]), "source": "fallback"}


def _stop_on_error(state: ParserState) -> str:
    return "stop" if state.get("error") else "continue"


def _after_ai(state: ParserState) -> str:
    return "validate" if state.get("ai_data") else "fallback"


def build_parser_graph():
    g = StateGraph(ParserState)
    g.add_node("check_type", node_check_type)
    g.add_node("extract", node_extract)
    g.add_node("empty_check", node_empty_check)
    g.add_node("ai_extract", node_ai_extract)
    g.add_node("validate", node_validate)
    g.add_node("fallback", node_fallback)
    g.set_entry_point("check_type")
    g.add_conditional_edges("check_type", _stop_on_error, {"stop": END, "continue": "extract"})
    g.add_conditional_edges("extract", _stop_on_error, {"stop": END, "continue": "empty_check"})
    g.add_conditional_edges("empty_check", _stop_on_error, {"stop": END, "continue": "ai_extract"})
    g.add_conditional_edges("ai_extract", _after_ai, {"validate": "validate", "fallback": "fallback"})
    g.add_edge("validate", END)
    g.add_edge("fallback", END)
    return g.compile()


PARSER_GRAPH = build_parser_graph()


def parse_resume(file_bytes: bytes, mime_type: str, chat: Callable[..., str] = groq_chat) -> ParseResult:
    final = PARSER_GRAPH.invoke({
        "file_bytes": file_bytes,
        "mime_type": mime_type,
        "chat": chat,
    })
    if final.get("error"):
        return ParseResult(raw_text="", parsed_data=ParsedProfile(), source="none", error=final["error"])
    return ParseResult(
        raw_text=final["raw_text"],
        parsed_data=final["parsed_data"],
        source=final["source"],
    )
