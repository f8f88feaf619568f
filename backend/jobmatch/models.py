from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire and blob shapes use camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class EducationEntry(CamelModel):
    degree: str = ""
    institution: str = ""
    year: str = ""


class ExperienceEntry(CamelModel):
    company: str = ""
    position: str = ""
    duration: str = ""
    description: str = ""


class ResumeAnalysis(CamelModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    education: List[EducationEntry] = Field(default_factory=list)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)


class ParsedResume(ResumeAnalysis):
    text: str = ""


class BarGraphMetrics(CamelModel):
    skill_match: float = 0
    experience_match: float = 0
    education_match: float = 0
    overall_match: float = 0


class ThresholdScore(CamelModel):
    overall_score: float = 0
    selection_percentage: float = 0
    rejection_percentage: float = 100
    bar_graph_metrics: BarGraphMetrics = Field(default_factory=BarGraphMetrics)
    detailed_analysis: str = ""


class JobRecommendation(CamelModel):
    job_title: str = "Unknown Position"
    match_score: float = 0
    reasoning: str = "No reasoning provided"
    required_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)
    threshold_score: Optional[ThresholdScore] = None


class AnalysisResult(CamelModel):
    resume_analysis: ResumeAnalysis
    job_recommendations: List[JobRecommendation] = Field(default_factory=list)
    timestamp: str


class Job(CamelModel):
    id: str
    title: str
    company: str
    location: str
    description: str
    skills: List[str] = Field(default_factory=list)
    match_percentage: int = 0


class SkillTip(CamelModel):
    category: str
    title: str
    description: str
    resources: List[str] = Field(default_factory=list)
