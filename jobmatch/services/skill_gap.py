from typing import List

from jobmatch.helpers.parsing import parse_json_object
from jobmatch.helpers.prompts import SKILL_GAP_PROMPT, SKILL_GAP_SYSTEM_PROMPT
from jobmatch.models.models import SkillGap
from jobmatch.services.matching import missing_skills
from jobmatch.utils.logging_config import get_logger
from jobmatch.utils.utils import ChatFn, groq_chat

logger = get_logger(__name__)


def _strings(x) -> List[str]:
    if not isinstance(x, list):
        return []
    return [str(s).strip() for s in x if isinstance(s, (str, int, float)) and str(s).strip()]


def heuristic_skill_gap(user_skills: List[str], job_requirements: List[str]) -> SkillGap:
    return SkillGap(missing_skills=missing_skills(user_skills, job_requirements))


def analyze_skill_gap(user_skills: List[str], job_requirements: List[str], chat: ChatFn = groq_chat) -> SkillGap:
    """Missing skills, skills to improve and suggested courses for a job."""
    prompt = SKILL_GAP_PROMPT.format(
        user_skills=", ".join(user_skills),
        job_requirements=", ".join(job_requirements),
    )
    try:
        answer = chat(prompt, system=SKILL_GAP_SYSTEM_PROMPT, temperature=0.3, max_tokens=1500)
    except Exception as e:
        logger.warning(f"Skill gap analysis failed, using heuristic: {e}")
        return heuristic_skill_gap(user_skills, job_requirements)

    data = parse_json_object(answer)
    if data is None:
        logger.warning("Skill gap answer was not JSON, using heuristic")
        return heuristic_skill_gap(user_skills, job_requirements)

    courses = [c for c in data.get("recommendedCourses") or [] if isinstance(c, dict) and c.get("title")]
    return SkillGap(
        missing_skills=_strings(data.get("missingSkills")),
        skill_improvements=_strings(data.get("skillImprovements")),
        recommended_courses=courses,
    )
