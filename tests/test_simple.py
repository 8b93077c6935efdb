import json
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from jobmatch.config import PDF_MIME
from jobmatch.helpers.parsing import EXTRACTORS
from jobmatch.services.coach import calculate_ats_score, chat_coach
from jobmatch.services.job_search import calculate_match_score, search_jobs, to_listing
from jobmatch.services.simple_analysis import analyze_resume
from jobmatch.services.skill_gap import analyze_skill_gap
from jobmatch.utils.exceptions import ModelError, ProcessingError

LONG_TEXT = "Jane Doe, Python and Docker engineer with a decade of Kubernetes and AWS experience."


@pytest.fixture
def test_app():
    from fastapi import FastAPI
    from jobmatch.middleware.error_handlers import register_exception_handlers
    from jobmatch.routers import simple

    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(simple.router)
    return app


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


class TestSimpleAnalysis:
    """Test cases for stateless résumé analysis"""

    def test_short_text_is_rejected(self):
        with patch.dict(EXTRACTORS, {PDF_MIME: lambda data: "too short"}):
            with pytest.raises(ProcessingError) as exc_info:
                analyze_resume(b"%PDF", PDF_MIME, chat=lambda p, **kw: "{}")
        assert "Could not extract text from resume" in exc_info.value.message

    def test_unsupported_type(self):
        with pytest.raises(ProcessingError):
            analyze_resume(b"x", "image/png", chat=lambda p, **kw: "{}")

    def test_model_json_is_returned_with_raw_text(self):
        answer = json.dumps({"name": "Jane Doe", "skills": ["Python"]})
        with patch.dict(EXTRACTORS, {PDF_MIME: lambda data: LONG_TEXT}):
            result = analyze_resume(b"%PDF", PDF_MIME, chat=lambda p, **kw: answer)
        assert result["name"] == "Jane Doe"
        assert result["rawText"] == LONG_TEXT

    def test_non_json_answer_uses_basic_analysis(self):
        with patch.dict(EXTRACTORS, {PDF_MIME: lambda data: LONG_TEXT}):
            result = analyze_resume(b"%PDF", PDF_MIME, chat=lambda p, **kw: "no json here")
        assert result["skills"] == ["Python", "AWS", "Docker", "Kubernetes"]
        assert result["experience"] == []
        assert result["summary"] == LONG_TEXT[:200] + "..."


class TestJobSearch:
    """Test cases for external job search"""

    def test_match_score(self):
        assert calculate_match_score(["Python", "SQL"], []) == 0.5
        assert calculate_match_score(["Python", "SQL"], ["python", "Docker"]) == 0.5
        assert calculate_match_score(["Python"], ["Python 3", "Pythonic design"]) == 1.0

    def test_listing_defaults(self):
        listing = to_listing({"job_city": "Austin", "job_state": "TX"}, ["React"])
        assert listing["title"] == "Unknown Title"
        assert listing["company"] == "Unknown Company"
        assert listing["location"] == "Austin, TX"
        assert listing["url"] == "#"
        assert listing["match_score"] == 0.5

    @patch('jobmatch.services.job_search.RAPIDAPI_KEY', "")
    def test_no_key_returns_nothing(self):
        assert search_jobs(["Python"]) == []

    @patch('jobmatch.services.job_search.requests.get')
    @patch('jobmatch.services.job_search.RAPIDAPI_KEY', "key")
    def test_search_maps_first_ten(self, mock_get):
        mock_get.return_value = MagicMock(ok=True, json=lambda: {
            "data": [{"job_title": f"Dev {i}", "employer_name": "Acme", "job_country": "US"} for i in range(15)]
        })

        jobs = search_jobs(["React", "Node.js"], None, "Austin")

        assert len(jobs) == 10
        assert jobs[0]["title"] == "Dev 0"
        assert jobs[0]["location"] == "US"
        assert mock_get.call_args.kwargs["params"]["query"] == "React Austin"

    @patch('jobmatch.services.job_search.requests.get')
    @patch('jobmatch.services.job_search.RAPIDAPI_KEY', "key")
    def test_upstream_error_returns_nothing(self, mock_get):
        mock_get.return_value = MagicMock(ok=False, status_code=429, reason="Too Many Requests")
        assert search_jobs(["React"]) == []


class TestSkillGap:
    """Test cases for skill gap analysis"""

    def test_model_answer(self):
        answer = json.dumps({
            "missingSkills": ["Kubernetes"],
            "skillImprovements": ["Docker"],
            "recommendedCourses": [{"title": "K8s 101", "description": "Basics"}, {"description": "untitled"}],
        })
        gap = analyze_skill_gap(["Docker"], ["Docker", "Kubernetes"], chat=lambda p, **kw: answer)
        assert gap.missing_skills == ["Kubernetes"]
        assert gap.skill_improvements == ["Docker"]
        assert gap.recommended_courses == [{"title": "K8s 101", "description": "Basics"}]

    def test_failure_uses_matcher(self):
        def chat(prompt, **kwargs):
            raise ModelError("groq API error: 500")

        gap = analyze_skill_gap(["Python"], ["Python", "SQL", "Statistics"], chat=chat)
        assert gap.missing_skills == ["SQL", "Statistics"]
        assert gap.recommended_courses == []


class TestCoach:
    """Test cases for the career coach and ATS score"""

    def test_ats_score_components(self):
        data = {
            "contact": {"email": "jane@x.com", "phone": "555"},
            "skills": ["a"] * 4,
            "experience": [{}],
            "education": [{}],
            "summary": "Engineer",
        }
        # 10 + 10 + 12.5 + 7.5 + 10, short payload
        assert calculate_ats_score(data) == 50

    def test_ats_score_caps_and_rounds_half_up(self):
        assert calculate_ats_score(None) == 0
        assert calculate_ats_score({"experience": [{}]}) == 13
        full = {
            "contact": {"email": "e", "phone": "p"},
            "skills": ["skill-%d" % i for i in range(40)],
            "experience": [{"description": "x" * 400}] * 3,
            "education": [{}] * 3,
            "summary": "s",
        }
        assert calculate_ats_score(full) == 100

    def test_ats_score_only_when_asked(self):
        reply = lambda p, **kw: "Tighten your summary."
        assert chat_coach("How is my resume?", {"skills": ["Python"]}, chat=reply)["atsScore"] is None
        result = chat_coach("What's my ATS score?", {"skills": ["Python"]}, chat=reply)
        assert result["response"] == "Tighten your summary."
        assert result["atsScore"] == 3

    def test_prompt_summarises_resume(self):
        seen = []

        def chat(prompt, **kwargs):
            seen.append(prompt)
            return "ok"

        chat_coach("Help", {"skills": ["Go", "Rust"], "experience": [{}, {}]}, chat=chat)
        assert "- Skills: Go, Rust" in seen[0]
        assert "- Experience: 2 positions" in seen[0]
        assert "- Education: 0 degrees" in seen[0]


class TestSimpleRouter:
    """Test cases for the simple-mode router"""

    def test_analyze_without_file(self, client):
        response = client.post("/api/simple-analyze", files={"other": ("a.txt", b"x", "text/plain")})
        assert response.status_code == 400
        assert response.json()["error"] == "No file provided"

    @patch('jobmatch.routers.simple.analyze_resume')
    def test_analyze_success(self, mock_analyze, client):
        mock_analyze.return_value = {"name": "Jane Doe", "rawText": "..."}

        response = client.post("/api/simple-analyze", files={"file": ("cv.pdf", b"%PDF", PDF_MIME)})

        assert response.status_code == 200
        assert response.json() == {"success": True, "analysis": {"name": "Jane Doe", "rawText": "..."}}

    @patch('jobmatch.routers.simple.analyze_resume')
    def test_analyze_failure(self, mock_analyze, client):
        mock_analyze.side_effect = ProcessingError("Failed to parse resume: Could not extract text from resume")

        response = client.post("/api/simple-analyze", files={"file": ("cv.pdf", b"%PDF", PDF_MIME)})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to analyze resume"
        assert "Could not extract text" in body["details"]

    def test_jobs_requires_skills(self, client):
        response = client.post("/api/simple-jobs", json={"skills": "Python"})
        assert response.status_code == 400
        assert response.json()["error"] == "Skills array is required"

    @patch('jobmatch.routers.simple.search_jobs')
    def test_jobs_success(self, mock_search, client):
        mock_search.return_value = [{"title": "Dev"}]

        response = client.post("/api/simple-jobs", json={"skills": ["Python"]})

        assert response.status_code == 200
        assert response.json() == {"success": True, "jobs": [{"title": "Dev"}]}
        mock_search.assert_called_once_with(["Python"], None, "United States")

    def test_coach_requires_message(self, client):
        response = client.post("/api/chat-coach", json={"resumeData": {}})
        assert response.status_code == 400
        assert response.json()["error"] == "Message is required"

    @patch('jobmatch.routers.simple.chat_coach')
    def test_coach_upstream_failure(self, mock_coach, client):
        mock_coach.side_effect = ModelError("nvidia API error: 401 - bad key")

        response = client.post("/api/chat-coach", json={"message": "hi"})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to get response"

    @patch('jobmatch.routers.simple.analyze_skill_gap')
    def test_skill_gap(self, mock_gap, client):
        from jobmatch.models.models import SkillGap
        mock_gap.return_value = SkillGap(missing_skills=["SQL"])

        response = client.post("/api/skill-gap", json={"user_skills": ["Python"], "job_requirements": ["SQL"]})

        assert response.status_code == 200
        assert response.json()["missingSkills"] == ["SQL"]
