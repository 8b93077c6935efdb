"""
Batch job scoring against a résumé with the hosted chat model.

One prompt per batch and a single attempt. Whatever goes wrong, the caller
gets a batch of the same length as the job list.
"""
from typing import Any, List, Optional

from jobmatch.helpers.parsing import parse_json_object
from jobmatch.helpers.prompts import SCORING_PROMPT, SCORING_SYSTEM_PROMPT
from jobmatch.models.models import ScoreBatch
from jobmatch.utils.logging_config import get_logger, PerformanceMonitor
from jobmatch.utils.utils import ChatFn, groq_chat

logger = get_logger(__name__)

FALLBACK_SCORE = 0.5
FALLBACK_REASONING = "AI-generated match"


def fallback_batch(n: int) -> ScoreBatch:
    return ScoreBatch(
        scores=[FALLBACK_SCORE] * n,
        reasoning=[FALLBACK_REASONING] * n,
        fallback=True,
    )


def clamp_score(x: Any) -> float:
    try:
        v = float(x)
    except (TypeError, ValueError):
        return FALLBACK_SCORE
    if v != v:  # NaN
        return FALLBACK_SCORE
    return max(0.0, min(1.0, v))


def build_scoring_prompt(resume_text: str, job_descriptions: List[str]) -> str:
    job_list = "\n".join(f"{i + 1}. {desc}" for i, desc in enumerate(job_descriptions))
    return SCORING_PROMPT.format(resume_text=resume_text, job_list=job_list)


def normalize_batch(data: Optional[dict], n: int) -> ScoreBatch:
    """Shape a parsed answer into exactly ``n`` scores and reasons."""
    if not data:
        return fallback_batch(n)
    raw_scores = data.get("scores")
    raw_reasoning = data.get("reasoning")
    if not isinstance(raw_scores, list) or not isinstance(raw_reasoning, list):
        return fallback_batch(n)

    scores = []
    reasoning = []
    for i in range(n):
        scores.append(clamp_score(raw_scores[i]) if i < len(raw_scores) else FALLBACK_SCORE)
        why = raw_reasoning[i] if i < len(raw_reasoning) else None
        reasoning.append(str(why).strip() if isinstance(why, str) and why.strip() else FALLBACK_REASONING)
    return ScoreBatch(scores=scores, reasoning=reasoning)


def score_jobs(resume_text: str, job_descriptions: List[str], chat: ChatFn = groq_chat) -> ScoreBatch:
    n = len(job_descriptions)
    if n == 0:
        return ScoreBatch()

    prompt = build_scoring_prompt(resume_text, job_descriptions)
    try:
        with PerformanceMonitor(f"score_jobs[{n}]", logger, threshold_ms=10000):
            answer = chat(prompt, system=SCORING_SYSTEM_PROMPT)
    except Exception as e:
        logger.warning(f"Job scoring call failed, using fallback scores: {e}")
        return fallback_batch(n)

    data = parse_json_object(answer)
    if data is None:
        logger.warning(f"Job scoring answer was not JSON, using fallback scores: {str(answer)[:200]!r}")
    return normalize_batch(data, n)
