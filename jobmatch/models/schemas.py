from pydantic import BaseModel, Field
from typing import Any, List, Optional
from datetime import datetime
from enum import Enum


class ExperienceLevel(str, Enum):
    ENTRY = "entry"
    MID = "mid"
    SENIOR = "senior"
    EXECUTIVE = "executive"


class FeedbackType(str, Enum):
    LIKE = "like"
    DISLIKE = "dislike"
    APPLIED = "applied"
    NOT_INTERESTED = "not_interested"
    SAVED = "saved"


# -------- Parsed résumé profile --------
class ContactInfo(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None


class WorkExperience(BaseModel):
    company: str
    position: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    description: Optional[str] = None
    skills_used: List[str] = Field(default_factory=list)


class Education(BaseModel):
    institution: str
    degree: str
    field_of_study: Optional[str] = None
    graduation_date: Optional[str] = None


class ParsedProfile(BaseModel):
    contact_info: ContactInfo = Field(default_factory=ContactInfo)
    skills: List[str] = Field(default_factory=list)
    experience: List[WorkExperience] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    summary: Optional[str] = None


# -------- Jobs --------
class JobPosting(BaseModel):
    job_id: str
    title: str
    company: str
    description: str = ""
    requirements: List[str] = Field(default_factory=list)
    required_skills: List[str] = Field(default_factory=list)
    preferred_skills: List[str] = Field(default_factory=list)
    experience_level: Optional[str] = None  # entry, mid, senior, executive
    location: Optional[str] = None
    job_type: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    embedding: Optional[List[float]] = None
    is_active: bool = True


# -------- Recommendations --------
class Recommendation(BaseModel):
    job_id: str
    user_id: str
    resume_id: str
    match_score: float = Field(ge=0.0, le=1.0)
    skills_match: List[str] = Field(default_factory=list)
    experience_match: bool = True
    reasoning: str = ""
    created_at: datetime = Field(default_factory=datetime.utcnow)


class FeedbackPayload(BaseModel):
    # Optional so that missing fields surface as 400 rather than 422
    recommendation_id: Optional[str] = None
    feedback_type: Optional[str] = None
    feedback_reason: Optional[str] = None


# -------- Stateless endpoints --------
class SimpleJobsRequest(BaseModel):
    skills: Any = None
    experience: Any = None
    location: Optional[str] = None


class SkillGapRequest(BaseModel):
    user_skills: List[str] = Field(default_factory=list)
    job_requirements: List[str] = Field(default_factory=list)


class ChatCoachRequest(BaseModel):
    message: Optional[str] = None
    resumeData: Optional[dict] = None
