"""
Development sample jobs, embedded and upserted by (title, company).
"""
import asyncio
import uuid
from datetime import datetime
from typing import Any, Dict, List

from jobmatch.config import SEED_EMBED_CONCURRENCY
from jobmatch.services.db import jobs_coll
from jobmatch.utils.exceptions import DatabaseError
from jobmatch.utils.logging_config import get_logger
from jobmatch.utils.utils import embed_text

logger = get_logger(__name__)

SAMPLE_JOBS: List[Dict[str, Any]] = [
    {
        "title": "Senior Full Stack Developer",
        "company": "TechCorp Solutions",
        "description": (
            "We are seeking a Senior Full Stack Developer to join our dynamic team. You will be responsible "
            "for developing and maintaining web applications using modern technologies like React, Node.js, "
            "and TypeScript. Design and develop scalable web applications, collaborate with cross-functional "
            "teams, implement best practices for code quality and testing, and mentor junior developers."
        ),
        "requirements": [
            "5+ years of web development experience",
            "Strong problem-solving skills",
            "Experience with agile methodologies",
            "Bachelor's degree in Computer Science or equivalent",
        ],
        "required_skills": ["JavaScript", "React", "Node.js", "HTML", "CSS"],
        "preferred_skills": ["React", "Node.js", "TypeScript", "PostgreSQL", "AWS", "Docker"],
        "experience_level": "senior",
        "location": "San Francisco, CA",
        "job_type": "full-time",
        "work_arrangement": "remote",
        "salary_min": 120000,
        "salary_max": 180000,
        "industry": "Technology",
    },
    {
        "title": "Machine Learning Engineer",
        "company": "DataMind Analytics",
        "description": (
            "Join our ML team to build and deploy machine learning models that power our data analytics "
            "platform. Develop and deploy ML models in production, work with data scientists to implement "
            "algorithms, optimize model performance and scalability, and build ML pipelines."
        ),
        "requirements": [
            "3+ years of ML experience",
            "Strong Python programming skills",
            "Experience with ML frameworks like TensorFlow or PyTorch",
            "Understanding of statistical methods",
        ],
        "required_skills": ["Python", "Machine Learning", "TensorFlow", "Statistics"],
        "preferred_skills": ["Python", "TensorFlow", "PyTorch", "AWS", "Docker", "Kubernetes"],
        "experience_level": "mid",
        "location": "New York, NY",
        "job_type": "full-time",
        "work_arrangement": "hybrid",
        "salary_min": 110000,
        "salary_max": 160000,
        "industry": "Data Analytics",
    },
    {
        "title": "Frontend Developer",
        "company": "StartupHub Inc",
        "description": (
            "Looking for a passionate frontend developer to help build the next generation of fintech "
            "applications. Build responsive and interactive user interfaces, collaborate with designers and "
            "backend developers, and optimize applications for performance and accessibility."
        ),
        "requirements": [
            "2+ years of frontend development experience",
            "Strong JavaScript and React skills",
            "Experience with responsive design",
            "Understanding of web performance optimization",
        ],
        "required_skills": ["React", "JavaScript", "HTML", "CSS"],
        "preferred_skills": ["React", "TypeScript", "Tailwind CSS", "Next.js", "Git"],
        "experience_level": "mid",
        "location": "Austin, TX",
        "job_type": "full-time",
        "work_arrangement": "on-site",
        "salary_min": 80000,
        "salary_max": 120000,
        "industry": "Financial Technology",
    },
    {
        "title": "DevOps Engineer",
        "company": "TechCorp Solutions",
        "description": (
            "We're looking for a DevOps Engineer to help us scale our infrastructure and improve our "
            "deployment processes. Manage cloud infrastructure on AWS, implement CI/CD pipelines, monitor "
            "system performance and reliability, and automate deployment processes."
        ),
        "requirements": [
            "3+ years of DevOps or Infrastructure experience",
            "Experience with cloud platforms (AWS, GCP, or Azure)",
            "Knowledge of containerization technologies",
            "Strong scripting skills",
        ],
        "required_skills": ["AWS", "Docker", "CI/CD", "Linux"],
        "preferred_skills": ["AWS", "Docker", "Kubernetes", "Jenkins", "Terraform", "Python"],
        "experience_level": "mid",
        "location": "San Francisco, CA",
        "job_type": "full-time",
        "work_arrangement": "remote",
        "salary_min": 100000,
        "salary_max": 150000,
        "industry": "Technology",
    },
    {
        "title": "Data Scientist",
        "company": "DataMind Analytics",
        "description": (
            "Join our data science team to extract insights from large datasets and help drive business "
            "decisions. Analyze large datasets to identify trends, build predictive models and statistical "
            "analyses, and communicate findings to stakeholders."
        ),
        "requirements": [
            "Master's degree in Statistics, Math, or related field",
            "2+ years of data science experience",
            "Strong analytical and statistical skills",
            "Experience with data visualization tools",
        ],
        "required_skills": ["Python", "SQL", "Statistics", "Data Analysis"],
        "preferred_skills": ["Python", "R", "SQL", "Pandas", "NumPy", "Matplotlib", "Tableau"],
        "experience_level": "mid",
        "location": "New York, NY",
        "job_type": "full-time",
        "work_arrangement": "hybrid",
        "salary_min": 95000,
        "salary_max": 140000,
        "industry": "Data Analytics",
    },
]


def job_embedding_text(job: Dict[str, Any]) -> str:
    return " ".join([
        job["title"],
        job["description"],
        " ".join(job["required_skills"]),
        " ".join(job["preferred_skills"]),
    ])


async def _embed_job(job: Dict[str, Any], semaphore: asyncio.Semaphore) -> Dict[str, Any]:
    loop = asyncio.get_running_loop()
    async with semaphore:
        try:
            embedding = await loop.run_in_executor(None, embed_text, job_embedding_text(job))
        except Exception as e:
            # stored without a vector; ranking puts such jobs last
            logger.error(f"Error generating embedding for job {job['title']}: {e}")
            embedding = None
    return {**job, "embedding": embedding}


async def seed_jobs(jobs: List[Dict[str, Any]] = SAMPLE_JOBS) -> int:
    """Embed and upsert ``jobs``; returns how many were written."""
    semaphore = asyncio.Semaphore(SEED_EMBED_CONCURRENCY)
    embedded = await asyncio.gather(*[_embed_job(job, semaphore) for job in jobs])

    now = datetime.utcnow()
    written = 0
    for job in embedded:
        try:
            await jobs_coll.update_one(
                {"title": job["title"], "company": job["company"]},
                {
                    "$set": {**job, "is_active": True, "updated_at": now},
                    "$setOnInsert": {"job_id": str(uuid.uuid4()), "created_at": now},
                },
                upsert=True,
            )
        except Exception as e:
            raise DatabaseError("Failed to insert jobs", operation="upsert", collection="jobs", cause=e)
        written += 1

    logger.info(f"Seeded {written} sample jobs")
    return written
