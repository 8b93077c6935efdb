import json
import math
from typing import Any, Dict, Optional

from jobmatch.helpers.prompts import COACH_PROMPT
from jobmatch.utils.logging_config import get_logger
from jobmatch.utils.utils import ChatFn, nvidia_chat

logger = get_logger(__name__)

ATS_TRIGGERS = ("ats", "score")


def _count(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    return len(value) if isinstance(value, list) else 0


def calculate_ats_score(resume_data: Optional[Dict[str, Any]]) -> int:
    """Heuristic 0-100 ATS readiness score.

    contact 10, skills 25, experience 25, education 15, length 15, summary 10.
    """
    data = resume_data or {}
    contact = data.get("contact") or data.get("contact_info") or {}
    if not isinstance(contact, dict):
        contact = {}

    score = 0.0
    if contact.get("email") or data.get("email"):
        score += 5
    if contact.get("phone") or data.get("phone"):
        score += 5

    score += min(_count(data, "skills") * 2.5, 25)
    score += min(_count(data, "experience") * 12.5, 25)
    score += min(_count(data, "education") * 7.5, 15)

    text_length = len(json.dumps(resume_data, default=str))
    if text_length > 500:
        score += 7.5
    if text_length > 1000:
        score += 7.5

    if data.get("summary") or data.get("objective"):
        score += 10

    # half-up, not banker's rounding
    return int(math.floor(min(score, 100) + 0.5))


def wants_ats_score(message: str) -> bool:
    lower = message.lower()
    return any(t in lower for t in ATS_TRIGGERS)


def chat_coach(message: str, resume_data: Optional[Dict[str, Any]], chat: ChatFn = nvidia_chat) -> Dict[str, Any]:
    data = resume_data or {}
    skills = data.get("skills") if isinstance(data.get("skills"), list) else []
    prompt = COACH_PROMPT.format(
        skills=", ".join(str(s) for s in skills) or "None",
        experience_count=_count(data, "experience"),
        education_count=_count(data, "education"),
        message=message,
    )
    response = chat(prompt)
    ats_score = calculate_ats_score(resume_data) if wants_ats_score(message) else None
    logger.info(f"Coach answered {len(response)} chars (ats_score={ats_score})")
    return {"response": response, "atsScore": ats_score}
