"""Client-side persisted state for the UI.

The UI keeps the last resume analysis and job recommendations between page
renders. Storage is any ``KeyValueStore``; ``MappingStore`` adapts a mutable
mapping such as Streamlit's ``st.session_state``.
"""
import json
from typing import Any, List, MutableMapping, Optional, Protocol

from pydantic import ValidationError

from .analyzer import fallback_threshold_score
from .logging_utils import get_logger
from .models import JobRecommendation, ResumeAnalysis

logger = get_logger(__name__)

RESUME_ANALYSIS_KEY = "resumeAnalysis"
JOB_RECOMMENDATIONS_KEY = "jobRecommendations"
LOGGED_IN_KEY = "isLoggedIn"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...

    def clear(self) -> None:
        ...


class MappingStore:
    """``KeyValueStore`` over a plain mutable mapping."""

    def __init__(self, backend: MutableMapping[str, Any]):
        self._backend = backend

    def get(self, key: str) -> Optional[str]:
        return self._backend.get(key)

    def set(self, key: str, value: str) -> None:
        self._backend[key] = value

    def delete(self, key: str) -> None:
        if key in self._backend:
            del self._backend[key]

    def clear(self) -> None:
        for key in list(self._backend.keys()):
            del self._backend[key]


def _normalize_recommendation(raw: dict) -> dict:
    # Entries saved before threshold scores existed used "title".
    normalized = dict(raw)
    normalized["jobTitle"] = raw.get("jobTitle") or raw.get("title") or ""
    normalized.pop("title", None)
    if not raw.get("thresholdScore"):
        normalized["thresholdScore"] = fallback_threshold_score("").to_json_dict()
    return normalized


class SessionStore:
    def __init__(self, store: KeyValueStore):
        self._store = store

    def get_resume_analysis(self) -> Optional[ResumeAnalysis]:
        data = self._store.get(RESUME_ANALYSIS_KEY)
        if not data:
            return None
        try:
            return ResumeAnalysis.model_validate_json(data)
        except ValidationError as e:
            logger.error(f"Error getting resume analysis: {e}")
            return None

    def set_resume_analysis(self, analysis: ResumeAnalysis) -> None:
        self._store.set(RESUME_ANALYSIS_KEY, json.dumps(analysis.to_json_dict()))

    def get_job_recommendations(self) -> List[JobRecommendation]:
        data = self._store.get(JOB_RECOMMENDATIONS_KEY)
        if not data:
            return []
        try:
            parsed = json.loads(data)
            if not isinstance(parsed, list):
                return []
            return [
                JobRecommendation.model_validate(_normalize_recommendation(job))
                for job in parsed
                if isinstance(job, dict)
            ]
        except (ValueError, ValidationError) as e:
            logger.error(f"Error getting job recommendations: {e}")
            return []

    def set_job_recommendations(self, recommendations: List[JobRecommendation]) -> None:
        self._store.set(
            JOB_RECOMMENDATIONS_KEY,
            json.dumps([job.to_json_dict() for job in recommendations]),
        )

    def is_logged_in(self) -> bool:
        return self._store.get(LOGGED_IN_KEY) == "true"

    def sign_in(self, email: str, password: str) -> bool:
        """Sign-in stub: any non-empty email and password is accepted."""
        if not (email and email.strip() and password):
            return False
        self._store.set(LOGGED_IN_KEY, "true")
        return True

    def clear_all(self) -> None:
        self._store.delete(RESUME_ANALYSIS_KEY)
        self._store.delete(JOB_RECOMMENDATIONS_KEY)

    def clear_user(self) -> None:
        self._store.clear()
