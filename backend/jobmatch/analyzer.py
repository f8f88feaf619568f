import asyncio
import json
from typing import Awaitable, Callable, List, Optional, TypeVar

from . import config
from .backoff import BackoffPolicy
from .exceptions import AnalysisError, JobMatchError, LLMResponseError, ServiceBusyError
from .gemini_client import GeminiClient
from .llm_json import (
    SchemaViolation,
    as_dict_list,
    as_str,
    as_str_list,
    clamp_percentage,
    decode_json_object,
    is_number,
)
from .logging_utils import get_logger
from .models import (
    BarGraphMetrics,
    EducationEntry,
    ExperienceEntry,
    JobRecommendation,
    ResumeAnalysis,
    ThresholdScore,
)

logger = get_logger(__name__)

T = TypeVar("T")

RECOMMENDATION_COUNT = 5
SCORE_UNAVAILABLE_MESSAGE = (
    "The AI service is currently busy. Please try again in a few minutes."
)

ANALYZE_PROMPT_TEMPLATE = """
You are a precise resume parser. Extract ONLY the following information from the resume text in JSON format:
{{
  "name": "Full name of the person",
  "email": "Email address",
  "phone": "Phone number",
  "education": [
    {{
      "degree": "Exact degree name (e.g., B.Tech, M.Sc)",
      "institution": "Full institution name",
      "year": "Year of completion or graduation"
    }}
  ],
  "experience": [
    {{
      "company": "Company name",
      "position": "Job title/position",
      "duration": "Duration (e.g., '2020-2022' or '2 years')",
      "description": "Key responsibilities and achievements"
    }}
  ],
  "skills": ["List of technical and soft skills"]
}}

Rules:
1. Extract ONLY the information that is explicitly stated in the resume
2. Do not make assumptions or add information that is not present
3. For experience, only include roles that are clearly mentioned
4. For education, only include degrees that are explicitly stated
5. For skills, only list skills that are specifically mentioned
6. If any field is not found in the resume, use an empty string or empty array
7. Do not add any additional fields or information

Resume text: {resume_text}
"""

RECOMMEND_PROMPT_TEMPLATE = """
You are an AI job matching expert. Based on the candidate's resume, suggest {count} most suitable job positions.

For each job recommendation, provide:
1. A specific job title that matches their experience and skills
2. A match score (0-100) based on skills alignment, experience relevance, education requirements and industry fit
3. A detailed reasoning for the match
4. Required skills they have
5. Missing skills they need to develop

Return the response in this exact JSON format:
{{
  "recommendations": [
    {{
      "jobTitle": "Specific job title",
      "matchScore": number between 0-100,
      "reasoning": "Detailed explanation of why this job is a good match",
      "requiredSkills": ["List of required skills they have"],
      "missingSkills": ["List of important skills they need to develop"]
    }}
  ]
}}

Rules:
1. Only recommend jobs that are realistic based on their experience
2. Be specific with job titles (e.g., "Frontend Developer" not just "Developer")
3. Provide detailed reasoning for each match
4. List only relevant required and missing skills
5. Match scores should reflect actual fit, not just wishful thinking

Resume Analysis: {resume_analysis_json}
"""

SCORE_PROMPT_TEMPLATE = """
You are a precise job matching analyzer. Calculate an accurate threshold score for the candidate's fit for the position of {job_title}.

Analyze the candidate's skills and experience in detail, considering:
1. Skills Match (0-30 points): (matching skills / total required skills) * 30
2. Experience Relevance (0-30 points): (relevant experience months / expected experience months) * 30
3. Education Alignment (0-20 points): (education match score / 100) * 20
4. Overall Potential (0-20 points): (potential score / 100) * 20

You must respond with ONLY a valid JSON object in this exact format:
{{
  "overallScore": number,
  "selectionPercentage": number,
  "rejectionPercentage": number,
  "barGraphMetrics": {{
    "skillMatch": number,
    "experienceMatch": number,
    "educationMatch": number,
    "overallMatch": number
  }},
  "detailedAnalysis": "string"
}}

Rules:
1. Be extremely precise with skill matching
2. Selection percentage should be based on overall score
3. Rejection percentage should be (100 - selection percentage)
4. All percentages should be between 0-100
5. Bar graph metrics should be percentages (0-100)
6. Provide specific examples in the analysis

Resume Analysis: {resume_analysis_json}
"""


def coerce_resume_analysis(payload: dict) -> ResumeAnalysis:
    return ResumeAnalysis(
        name=as_str(payload.get("name")),
        email=as_str(payload.get("email")),
        phone=as_str(payload.get("phone")),
        education=[
            EducationEntry(
                degree=as_str(edu.get("degree")),
                institution=as_str(edu.get("institution")),
                year=as_str(edu.get("year")),
            )
            for edu in as_dict_list(payload.get("education"))
        ],
        experience=[
            ExperienceEntry(
                company=as_str(exp.get("company")),
                position=as_str(exp.get("position")),
                duration=as_str(exp.get("duration")),
                description=as_str(exp.get("description")),
            )
            for exp in as_dict_list(payload.get("experience"))
        ],
        skills=as_str_list(payload.get("skills")),
    )


def coerce_recommendations(payload: dict) -> List[JobRecommendation]:
    recommendations = payload.get("recommendations")
    if not isinstance(recommendations, list):
        raise SchemaViolation("Response has no 'recommendations' list")

    return [
        JobRecommendation(
            job_title=as_str(rec.get("jobTitle"), "Unknown Position"),
            match_score=clamp_percentage(rec.get("matchScore")),
            reasoning=as_str(rec.get("reasoning"), "No reasoning provided"),
            required_skills=as_str_list(rec.get("requiredSkills")),
            missing_skills=as_str_list(rec.get("missingSkills")),
        )
        for rec in as_dict_list(recommendations)
    ]


def coerce_threshold_score(payload: dict) -> ThresholdScore:
    metrics = payload.get("barGraphMetrics")
    if not isinstance(metrics, dict):
        raise SchemaViolation("Response has no 'barGraphMetrics' object")
    if not is_number(payload.get("selectionPercentage")) or not is_number(payload.get("rejectionPercentage")):
        raise SchemaViolation("Selection and rejection percentages must be numbers")

    return ThresholdScore(
        overall_score=clamp_percentage(payload.get("overallScore")),
        selection_percentage=clamp_percentage(payload["selectionPercentage"]),
        rejection_percentage=clamp_percentage(payload["rejectionPercentage"]),
        bar_graph_metrics=BarGraphMetrics(
            skill_match=clamp_percentage(metrics.get("skillMatch")),
            experience_match=clamp_percentage(metrics.get("experienceMatch")),
            education_match=clamp_percentage(metrics.get("educationMatch")),
            overall_match=clamp_percentage(metrics.get("overallMatch")),
        ),
        detailed_analysis=as_str(payload.get("detailedAnalysis"), "No detailed analysis provided"),
    )


def fallback_threshold_score(message: str = SCORE_UNAVAILABLE_MESSAGE) -> ThresholdScore:
    return ThresholdScore(
        overall_score=0,
        selection_percentage=0,
        rejection_percentage=100,
        bar_graph_metrics=BarGraphMetrics(),
        detailed_analysis=message,
    )


def describe_provider_error(error: Exception) -> str:
    message = str(error)
    if "API key" in message:
        return "Invalid or missing Gemini API key. Please check your .env file."
    if "404" in message:
        return "Gemini API model not found. Please check your API key and model name."
    if "permission" in message.lower():
        return "API key does not have permission to access Gemini API. Please check your API key permissions."
    return message or "Unknown error"


class ResumeAnalyzer:
    """Runs the three dependent Gemini calls for one resume.

    Every call goes through ``backoff`` for capacity errors; a response that
    does not decode into the target record re-runs the whole call, up to
    ``max_attempts`` times.
    """

    def __init__(
        self,
        client: GeminiClient,
        backoff: Optional[BackoffPolicy] = None,
        max_attempts: int = config.GEMINI_MAX_ATTEMPTS,
        retry_pause: float = config.GEMINI_RETRY_PAUSE_SECONDS,
        call_spacing: float = config.GEMINI_CALL_SPACING_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client = client
        self.backoff = backoff or BackoffPolicy()
        self.max_attempts = max_attempts
        self.retry_pause = retry_pause
        self.call_spacing = call_spacing
        self._sleep = sleep

    async def _request(self, prompt: str, temperature: float, coerce: Callable[[dict], T], label: str) -> T:
        if self.call_spacing:
            await self._sleep(self.call_spacing)

        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1:
                await self._sleep(self.retry_pause)

            text = await self.backoff.run(
                lambda: self.client.generate_content(prompt, temperature),
                sleep=self._sleep,
            )
            result = decode_json_object(text, coerce)
            if result.ok:
                return result.value

            logger.warning(
                f"{label}: attempt {attempt}/{self.max_attempts} returned unusable JSON "
                f"({result.status.value}: {result.error})"
            )
            logger.debug(f"{label}: raw response: {text[:500]}")

        raise LLMResponseError("Failed to get valid JSON response after multiple attempts")

    async def analyze(self, resume_text: str) -> ResumeAnalysis:
        prompt = ANALYZE_PROMPT_TEMPLATE.format(resume_text=resume_text)
        try:
            return await self._request(prompt, 0.2, coerce_resume_analysis, "analyze")
        except JobMatchError:
            raise
        except Exception as e:
            logger.error(f"Error analyzing resume: {e}")
            raise AnalysisError(f"Analysis failed: {describe_provider_error(e)}") from e

    async def recommend(self, analysis: ResumeAnalysis) -> List[JobRecommendation]:
        prompt = RECOMMEND_PROMPT_TEMPLATE.format(
            count=RECOMMENDATION_COUNT,
            resume_analysis_json=json.dumps(analysis.to_json_dict()),
        )
        try:
            return await self._request(prompt, 0.2, coerce_recommendations, "recommend")
        except JobMatchError:
            raise
        except Exception as e:
            logger.error(f"Error getting job recommendations: {e}")
            raise AnalysisError(
                f"Failed to get job recommendations: {describe_provider_error(e)}"
            ) from e

    async def score(self, analysis: ResumeAnalysis, job_title: str) -> ThresholdScore:
        """Score the candidate against ``job_title``.

        Any failure other than a busy provider yields the zero score, so one
        bad job never aborts a batch.
        """
        prompt = SCORE_PROMPT_TEMPLATE.format(
            job_title=job_title,
            resume_analysis_json=json.dumps(analysis.to_json_dict()),
        )
        try:
            return await self._request(prompt, 0.1, coerce_threshold_score, f"score[{job_title}]")
        except ServiceBusyError:
            raise
        except Exception as e:
            logger.error(f"Error calculating threshold score for {job_title}: {e}")
            return fallback_threshold_score()
