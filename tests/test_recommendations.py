import uuid
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from jobmatch.models.models import AuthUser, ScoreBatch
from jobmatch.models.schemas import JobPosting, ParsedProfile, WorkExperience
from jobmatch.services.recommendations import assemble_recommendations, format_salary_range, to_view


def make_job(i, **kw):
    return JobPosting(job_id=f"job-{i}", title=f"Job {i}", company="Acme", description=f"Role {i}", **kw)


def fixed_scorer(scores):
    calls = []

    def score(resume_text, descriptions):
        calls.append(descriptions)
        return ScoreBatch(scores=scores[:len(descriptions)], reasoning=[f"r{i}" for i in range(len(descriptions))])
    score.calls = calls
    return score


class TestRecommendationAssembler:
    """Test cases for assembling recommendations"""

    def test_filters_and_sorts_descending(self):
        jobs = [make_job(i) for i in range(5)]
        score = fixed_scorer([0.4, 0.9, 0.2, 0.6, 0.8])
        recs = assemble_recommendations(ParsedProfile(), jobs, "text", "u1", "r1", score=score)

        assert [r.match_score for r in recs] == [0.9, 0.8, 0.6, 0.4]
        assert [r.job_id for r in recs] == ["job-1", "job-4", "job-3", "job-0"]
        assert all(r.user_id == "u1" and r.resume_id == "r1" for r in recs)
        assert len(score.calls) == 1

    def test_threshold_is_inclusive(self):
        jobs = [make_job(0), make_job(1)]
        recs = assemble_recommendations(ParsedProfile(), jobs, "t", "u", "r", score=fixed_scorer([0.3, 0.29]))
        assert [r.job_id for r in recs] == ["job-0"]

    def test_empty_jobs_never_calls_scorer(self):
        score = fixed_scorer([])
        assert assemble_recommendations(ParsedProfile(), [], "t", "u", "r", score=score) == []
        assert score.calls == []

    def test_skills_and_experience_are_attached(self):
        profile = ParsedProfile(
            skills=["JavaScript", "React"],
            experience=[WorkExperience(company="A", position="Dev")],
        )
        job = make_job(
            0,
            required_skills=["JavaScript", "React", "Node.js", "HTML", "CSS"],
            experience_level="senior",
        )
        recs = assemble_recommendations(profile, [job], "t", "u", "r", score=fixed_scorer([0.7]))
        assert recs[0].skills_match == ["JavaScript", "React"]
        assert recs[0].experience_match is False

    def test_stable_order_for_ties(self):
        jobs = [make_job(i) for i in range(3)]
        recs = assemble_recommendations(ParsedProfile(), jobs, "t", "u", "r", score=fixed_scorer([0.5, 0.5, 0.5]))
        assert [r.job_id for r in recs] == ["job-0", "job-1", "job-2"]

    def test_embeddings_narrow_candidates(self):
        jobs = [make_job(i, embedding=[1.0, float(i)]) for i in range(12)]
        score = fixed_scorer([0.9] * 12)
        recs = assemble_recommendations(
            ParsedProfile(), jobs, "t", "u", "r", resume_embedding=[1.0, 0.0], score=score, candidate_limit=10
        )
        assert len(score.calls[0]) == 10
        assert recs[0].job_id == "job-0"

    def test_salary_range_format(self):
        assert format_salary_range(120000, 180000) == "$120,000 - $180,000"
        assert format_salary_range(None, 180000) is None

    def test_view_joins_job(self):
        rec = {"recommendation_id": "rec-1", "job_id": "job-1", "match_score": 0.8, "skills_match": ["Python"]}
        view = to_view(rec, {"title": "Data Scientist", "company": "DataMind", "salary_min": 95000, "salary_max": 140000})
        assert view.job_title == "Data Scientist"
        assert view.salary_range == "$95,000 - $140,000"
        assert to_view(rec, None).job_title == "Unknown Title"


def cursor_of(docs):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


@pytest.fixture
def test_app():
    from fastapi import FastAPI
    from jobmatch.middleware.error_handlers import register_exception_handlers
    from jobmatch.routers import recommendations
    from jobmatch.services.auth import get_current_user

    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(recommendations.router)
    app.dependency_overrides[get_current_user] = lambda: AuthUser(id="auth-1", email="jane@x.com")
    return app


@pytest.fixture
def client(test_app):
    with patch('jobmatch.services.auth.is_simple_mode', return_value=False):
        yield TestClient(test_app)


class TestRecommendationsRouter:
    """Test cases for the recommendations router"""

    @patch('jobmatch.routers.recommendations.users_coll')
    def test_profile_missing(self, mock_users_coll, client):
        mock_users_coll.find_one = AsyncMock(return_value=None)

        response = client.get("/api/recommendations")

        assert response.status_code == 404
        assert response.json()["error"] == "User profile not found"

    @patch('jobmatch.routers.recommendations.resumes_coll')
    @patch('jobmatch.routers.recommendations.users_coll')
    def test_no_resume_returns_empty_list(self, mock_users_coll, mock_resumes_coll, client):
        mock_users_coll.find_one = AsyncMock(return_value={"user_id": "u1"})
        mock_resumes_coll.find_one = AsyncMock(return_value=None)

        response = client.get("/api/recommendations")

        assert response.status_code == 200
        assert response.json() == {"recommendations": []}

    @patch('jobmatch.routers.recommendations.score_jobs')
    @patch('jobmatch.routers.recommendations.jobs_coll')
    @patch('jobmatch.routers.recommendations.recommendations_coll')
    @patch('jobmatch.routers.recommendations.resumes_coll')
    @patch('jobmatch.routers.recommendations.users_coll')
    def test_fresh_recommendations_are_served(
        self, mock_users_coll, mock_resumes_coll, mock_recs_coll, mock_jobs_coll, mock_score, client
    ):
        mock_users_coll.find_one = AsyncMock(return_value={"user_id": "u1"})
        mock_resumes_coll.find_one = AsyncMock(return_value={"resume_id": "r1", "parsed_data": {}})
        mock_recs_coll.find.return_value = cursor_of([
            {"recommendation_id": "rec-1", "job_id": "job-1", "match_score": 0.9, "created_at": datetime.utcnow()},
        ])
        mock_jobs_coll.find.return_value = cursor_of([
            {"job_id": "job-1", "title": "Frontend Developer", "company": "StartupHub Inc",
             "salary_min": 80000, "salary_max": 120000},
        ])

        response = client.get("/api/recommendations")

        assert response.status_code == 200
        recs = response.json()["recommendations"]
        assert len(recs) == 1
        assert recs[0]["job_title"] == "Frontend Developer"
        assert recs[0]["salary_range"] == "$80,000 - $120,000"
        mock_score.assert_not_called()

    @patch('jobmatch.routers.recommendations.score_jobs')
    @patch('jobmatch.routers.recommendations.jobs_coll')
    @patch('jobmatch.routers.recommendations.recommendations_coll')
    @patch('jobmatch.routers.recommendations.resumes_coll')
    @patch('jobmatch.routers.recommendations.users_coll')
    def test_stale_recommendations_are_regenerated(
        self, mock_users_coll, mock_resumes_coll, mock_recs_coll, mock_jobs_coll, mock_score, client
    ):
        job_docs = [
            {"job_id": f"job-{i}", "title": f"Job {i}", "company": "Acme", "description": "d",
             "required_skills": ["Python"], "experience_level": "mid"}
            for i in range(4)
        ]
        mock_users_coll.find_one = AsyncMock(return_value={"user_id": "u1"})
        mock_resumes_coll.find_one = AsyncMock(return_value={
            "resume_id": "r1",
            "raw_text": "Python developer",
            "parsed_data": {"skills": ["Python"]},
            "embedding": None,
        })
        mock_score.return_value = ScoreBatch(scores=[0.4, 0.9, 0.1, 0.6], reasoning=["a", "b", "c", "d"])
        mock_recs_coll.insert_many = AsyncMock()
        stored = []

        async def capture(docs):
            stored.extend(docs)
        mock_recs_coll.insert_many.side_effect = capture
        mock_recs_coll.find.side_effect = [cursor_of([]), cursor_of(stored)]
        mock_jobs_coll.find.return_value = cursor_of(job_docs)

        response = client.get("/api/recommendations")

        assert response.status_code == 200
        mock_score.assert_called_once()
        assert [d["match_score"] for d in stored] == [0.9, 0.6, 0.4]
        assert all(d["recommendation_id"] for d in stored)
        recs = response.json()["recommendations"]
        assert [r["job_id"] for r in recs] == ["job-1", "job-3", "job-0"]

    @patch('jobmatch.routers.recommendations.users_coll')
    def test_feedback_missing_fields(self, mock_users_coll, client):
        mock_users_coll.find_one = AsyncMock(return_value={"user_id": "u1"})

        response = client.post("/api/recommendations/feedback", json={"feedback_type": "like"})

        assert response.status_code == 400
        assert response.json()["error"] == "Missing required fields"

    @patch('jobmatch.routers.recommendations.users_coll')
    def test_feedback_invalid_type(self, mock_users_coll, client):
        mock_users_coll.find_one = AsyncMock(return_value={"user_id": "u1"})

        response = client.post(
            "/api/recommendations/feedback",
            json={"recommendation_id": "rec-1", "feedback_type": "love"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid feedback type"
        assert response.json()["details"]["field"] == "feedback_type"

    @patch('jobmatch.routers.recommendations.recommendations_coll')
    @patch('jobmatch.routers.recommendations.users_coll')
    def test_feedback_unknown_recommendation(self, mock_users_coll, mock_recs_coll, client):
        mock_users_coll.find_one = AsyncMock(return_value={"user_id": "u1"})
        mock_recs_coll.find_one = AsyncMock(return_value=None)

        response = client.post(
            "/api/recommendations/feedback",
            json={"recommendation_id": str(uuid.uuid4()), "feedback_type": "saved"},
        )

        assert response.status_code == 404
        assert response.json()["error"] == "Recommendation not found"

    @patch('jobmatch.routers.recommendations.feedback_coll')
    @patch('jobmatch.routers.recommendations.recommendations_coll')
    @patch('jobmatch.routers.recommendations.users_coll')
    def test_feedback_saved(self, mock_users_coll, mock_recs_coll, mock_feedback_coll, client):
        mock_users_coll.find_one = AsyncMock(return_value={"user_id": "u1"})
        mock_recs_coll.find_one = AsyncMock(return_value={"recommendation_id": "rec-1", "user_id": "u1"})
        mock_feedback_coll.insert_one = AsyncMock()

        response = client.post(
            "/api/recommendations/feedback",
            json={"recommendation_id": "rec-1", "feedback_type": "applied", "feedback_reason": "Great fit"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Feedback saved successfully"
        assert body["feedback"]["feedback_type"] == "applied"
        assert body["feedback"]["feedback_reason"] == "Great fit"
        mock_feedback_coll.insert_one.assert_awaited_once()

    @patch('jobmatch.routers.recommendations.feedback_coll')
    @patch('jobmatch.routers.recommendations.recommendations_coll')
    @patch('jobmatch.routers.recommendations.users_coll')
    def test_feedback_db_failure(self, mock_users_coll, mock_recs_coll, mock_feedback_coll, client):
        mock_users_coll.find_one = AsyncMock(return_value={"user_id": "u1"})
        mock_recs_coll.find_one = AsyncMock(return_value={"recommendation_id": "rec-1"})
        mock_feedback_coll.insert_one = AsyncMock(side_effect=Exception("write failed"))

        response = client.post(
            "/api/recommendations/feedback",
            json={"recommendation_id": "rec-1", "feedback_type": "like"},
        )

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to save feedback"

    def test_simple_mode_disables_router(self, test_app):
        with patch('jobmatch.services.auth.is_simple_mode', return_value=True):
            response = TestClient(test_app).get("/api/recommendations")
        assert response.status_code == 503
        assert response.json()["error"] == "This feature requires database authentication"
