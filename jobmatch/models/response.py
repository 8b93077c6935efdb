from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class RecommendationView(BaseModel):
    id: str
    job_id: str
    job_title: str
    company: str
    location: Optional[str] = None
    job_type: Optional[str] = None
    salary_range: Optional[str] = None
    requirements: List[str] = Field(default_factory=list)
    description: str = ""
    match_score: float
    skills_match: List[str] = Field(default_factory=list)
    experience_match: bool = True
    reasoning: Optional[str] = None
    created_at: Optional[datetime] = None


class ResumeView(BaseModel):
    id: str
    file_name: str
    file_type: str
    file_size: int
    parsed_data: dict
    upload_date: Optional[datetime] = None
    is_active: bool = True
