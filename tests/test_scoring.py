import json

import pytest

from jobmatch.services.scoring import (
    FALLBACK_REASONING,
    FALLBACK_SCORE,
    build_scoring_prompt,
    normalize_batch,
    score_jobs,
)
from jobmatch.utils.exceptions import ModelError

JOBS = [
    "Frontend Developer at StartupHub Inc: Build UIs",
    "Data Scientist at DataMind Analytics: Models",
    "DevOps Engineer at TechCorp Solutions: Pipelines",
]


def answering(text):
    calls = []

    def chat(prompt, **kwargs):
        calls.append(prompt)
        return text
    chat.calls = calls
    return chat


def failing(exc):
    def chat(prompt, **kwargs):
        raise exc
    return chat


class TestScoringAdapter:
    """Test cases for batch AI scoring"""

    def test_well_formed_answer(self):
        chat = answering(json.dumps({
            "scores": [0.9, 0.2, 0.55],
            "reasoning": ["Great", "Weak", "Okay"],
        }))
        batch = score_jobs("resume text", JOBS, chat=chat)

        assert batch.scores == [0.9, 0.2, 0.55]
        assert batch.reasoning == ["Great", "Weak", "Okay"]
        assert batch.fallback is False
        assert len(chat.calls) == 1

    def test_prompt_numbers_jobs(self):
        prompt = build_scoring_prompt("resume text", JOBS)
        assert "resume text" in prompt
        assert "1. Frontend Developer" in prompt
        assert "3. DevOps Engineer" in prompt

    def test_upstream_failure_gives_neutral_batch(self):
        batch = score_jobs("resume", JOBS, chat=failing(ModelError("groq API error: 500")))
        assert batch.scores == [FALLBACK_SCORE] * 3
        assert batch.reasoning == [FALLBACK_REASONING] * 3
        assert batch.fallback is True

    def test_unparseable_answer_gives_neutral_batch(self):
        batch = score_jobs("resume", JOBS, chat=answering("I cannot score these jobs."))
        assert batch.scores == [0.5, 0.5, 0.5]
        assert batch.fallback is True

    def test_json_wrapped_in_prose(self):
        answer = 'Here you go:\n```json\n{"scores": [0.7, 0.6, 0.1], "reasoning": ["a", "b", "c"]}\n```'
        batch = score_jobs("resume", JOBS, chat=answering(answer))
        assert batch.scores == [0.7, 0.6, 0.1]

    def test_short_answer_is_padded(self):
        answer = json.dumps({"scores": [0.8], "reasoning": []})
        batch = score_jobs("resume", JOBS, chat=answering(answer))
        assert batch.scores == [0.8, 0.5, 0.5]
        assert batch.reasoning == [FALLBACK_REASONING] * 3

    def test_long_answer_is_truncated_and_clamped(self):
        answer = json.dumps({"scores": [1.7, -0.2, "0.4", 0.9], "reasoning": ["a", "b", "c", "d"]})
        batch = score_jobs("resume", JOBS, chat=answering(answer))
        assert batch.scores == [1.0, 0.0, 0.4]
        assert len(batch.reasoning) == 3

    def test_empty_job_list_makes_no_call(self):
        chat = answering("{}")
        batch = score_jobs("resume", [], chat=chat)
        assert batch.scores == []
        assert batch.reasoning == []
        assert chat.calls == []

    @pytest.mark.parametrize("data", [None, {}, {"scores": "high"}, {"scores": [0.9]}])
    def test_normalize_always_matches_length(self, data):
        batch = normalize_batch(data, 4)
        assert len(batch.scores) == 4
        assert len(batch.reasoning) == 4
        assert all(0.0 <= s <= 1.0 for s in batch.scores)
