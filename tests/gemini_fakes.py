"""
Test doubles for the Gemini REST API and for ``asyncio.sleep``.

Gemini is faked with ``httpx.MockTransport`` and every sleep is recorded
instead of awaited, so nothing here touches the network or waits.
"""
import json
from collections import deque
from typing import List, Optional

import httpx

from jobmatch.gemini_client import GeminiClient


class SleepRecorder:
    """Async stand-in for ``asyncio.sleep`` that records requested delays."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(float(seconds))

    @property
    def total(self) -> float:
        return sum(self.calls)


def gemini_reply(text: str) -> httpx.Response:
    return httpx.Response(
        200,
        json={"candidates": [{"content": {"parts": [{"text": text}]}}]},
    )


def gemini_json_reply(payload) -> httpx.Response:
    return gemini_reply("```json\n" + json.dumps(payload) + "\n```")


def rate_limited_reply(retry_delay: Optional[str] = None) -> httpx.Response:
    error = {"error": {"code": 429, "status": "RESOURCE_EXHAUSTED"}}
    if retry_delay:
        error["error"]["details"] = [{"retryDelay": retry_delay}]
    return httpx.Response(429, text=json.dumps(error))


class FakeGemini:
    """Replays scripted responses, one per request, recording each prompt."""

    def __init__(self, *responses: httpx.Response):
        self.responses = deque(responses)
        self.prompts: List[str] = []

    def add(self, *responses: httpx.Response) -> "FakeGemini":
        self.responses.extend(responses)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.prompts.append(body["contents"][0]["parts"][0]["text"])
        if not self.responses:
            raise AssertionError("Unexpected Gemini request")
        return self.responses.popleft()

    def client(self) -> GeminiClient:
        return GeminiClient(
            api_key="test-key",
            endpoint="https://gemini.test/v1beta/models/test:generateContent",
            transport=httpx.MockTransport(self.handler),
        )


SAMPLE_RESUME = """JANE ANN DOE
jane.doe@example.com | +1 555-123-4567
SUMMARY
Backend engineer who enjoys Python, Docker and SQL.
EDUCATION
B.TECH in Computer Science 2019 - 2023 CGPA 8.9
Springfield Institute
State University of Technology
Master of Science 2024
Tech University
SKILLS
Python, Java, nodejs, React, SQL, Git
INTERNSHIP
Jun 2024 - Aug 2024
Acme Labs
SOFTWARE ENGINEERING INTERN
Built REST APIs for the billing service
Wrote integration tests
Globex
DATA INTERN
Jan 2024 - Mar 2024
Cleaned analytics datasets with pandas
CERTIFICATES
AWS Cloud Practitioner
"""
