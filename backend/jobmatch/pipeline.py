import asyncio
from typing import Awaitable, Callable, List

from . import config
from .analyzer import ResumeAnalyzer, fallback_threshold_score
from .exceptions import ServiceBusyError, StorageError
from .logging_utils import get_logger
from .models import AnalysisResult, JobRecommendation, ResumeAnalysis
from .storage import BlobStore, analysis_timestamp

logger = get_logger(__name__)

RATE_LIMITED_SCORE_MESSAGE = "Failed to calculate threshold score due to rate limiting"


async def score_recommendations(
    analyzer: ResumeAnalyzer,
    analysis: ResumeAnalysis,
    recommendations: List[JobRecommendation],
    pause: float = config.SCORE_PAUSE_SECONDS,
    rate_limit_pause: float = config.SCORE_RATE_LIMIT_PAUSE_SECONDS,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> List[JobRecommendation]:
    """
    Attach a threshold score to each recommendation, one call at a time.

    Args:
        analyzer: Analyzer issuing the score calls
        analysis: Normalized resume facts
        recommendations: Jobs to score, in order
        pause: Wait before every call after the first
        rate_limit_pause: Wait before the next call after a rate-limited failure
        sleep: Awaitable used for waits

    Returns:
        Copies of ``recommendations`` with ``threshold_score`` set
    """
    scored = []
    next_pause = pause

    for index, job in enumerate(recommendations):
        if index > 0:
            await sleep(next_pause)
        next_pause = pause

        try:
            score = await analyzer.score(analysis, job.job_title)
        except ServiceBusyError as e:
            logger.error(f"Error calculating threshold score for {job.job_title}: {e}")
            next_pause = rate_limit_pause
            score = fallback_threshold_score(RATE_LIMITED_SCORE_MESSAGE)

        scored.append(job.model_copy(update={"threshold_score": score}))

    return scored


class AnalysisService:
    """analyze -> recommend -> score x N, then persist the combined result."""

    def __init__(
        self,
        analyzer: ResumeAnalyzer,
        store: BlobStore,
        pause: float = config.SCORE_PAUSE_SECONDS,
        rate_limit_pause: float = config.SCORE_RATE_LIMIT_PAUSE_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.analyzer = analyzer
        self.store = store
        self.pause = pause
        self.rate_limit_pause = rate_limit_pause
        self._sleep = sleep

    async def run(self, resume_text: str) -> AnalysisResult:
        logger.info(f"Starting analysis of resume text ({len(resume_text)} chars)")
        analysis = await self.analyzer.analyze(resume_text)
        recommendations = await self.analyzer.recommend(analysis)
        logger.info(f"Scoring {len(recommendations)} recommended jobs")

        scored = await score_recommendations(
            self.analyzer,
            analysis,
            recommendations,
            pause=self.pause,
            rate_limit_pause=self.rate_limit_pause,
            sleep=self._sleep,
        )

        result = AnalysisResult(
            resume_analysis=analysis,
            job_recommendations=scored,
            timestamp=analysis_timestamp(),
        )

        try:
            self.store.save_analysis(result)
        except StorageError as e:
            logger.error(f"Error saving analysis results (continuing): {e}")

        return result
