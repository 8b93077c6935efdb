from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from jobmatch.models.schemas import ParsedProfile


class AuthUser(BaseModel):
    id: str
    email: Optional[str] = None
    full_name: Optional[str] = None


class SkillMatch(BaseModel):
    matched: List[str] = Field(default_factory=list)
    ratio: float = 0.0


class ScoreBatch(BaseModel):
    scores: List[float] = Field(default_factory=list)
    reasoning: List[str] = Field(default_factory=list)
    fallback: bool = False


class ParseResult(BaseModel):
    raw_text: str = ""
    parsed_data: ParsedProfile = Field(default_factory=ParsedProfile)
    source: Literal["ai", "fallback", "none"] = "none"
    error: Optional[str] = None


class SkillGap(BaseModel):
    missing_skills: List[str] = Field(default_factory=list)
    skill_improvements: List[str] = Field(default_factory=list)
    recommended_courses: List[dict] = Field(default_factory=list)
