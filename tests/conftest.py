"""
Pytest configuration and fixtures.
"""
import pytest

from jobmatch.analyzer import ResumeAnalyzer
from jobmatch.backoff import BackoffPolicy
from jobmatch.storage import BlobStore
from tests.gemini_fakes import SAMPLE_RESUME, FakeGemini, SleepRecorder


@pytest.fixture
def sleeps():
    return SleepRecorder()


@pytest.fixture
def fake_gemini():
    return FakeGemini()


@pytest.fixture
def backoff_policy():
    return BackoffPolicy(max_retries=8, initial_delay=2.0, factor=1.5, max_jitter=2.0, max_delay=30.0)


@pytest.fixture
def analyzer(fake_gemini, sleeps, backoff_policy):
    return ResumeAnalyzer(
        fake_gemini.client(),
        backoff=backoff_policy,
        max_attempts=3,
        retry_pause=2.0,
        call_spacing=0,
        sleep=sleeps,
    )


@pytest.fixture
def blob_store(tmp_path):
    return BlobStore(tmp_path / "uploads")


@pytest.fixture
def sample_resume():
    return SAMPLE_RESUME
