from typing import List, Optional

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from .analyzer import ResumeAnalyzer
from .catalog import SKILL_TIPS, STUB_PROFILE_SKILLS
from .exceptions import (
    InvalidRequestError,
    JobMatchError,
    ResumeNotFoundError,
    jobmatch_exception_handler,
    unhandled_exception_handler,
)
from .gemini_client import GeminiClient
from .job_matching import match_jobs
from .logging_utils import get_logger
from .models import AnalysisResult, Job, SkillTip
from .parser import default_recognition_rules, parse_resume_text
from .pdf_utils import extract_text, is_supported_media_type
from .pipeline import AnalysisService
from .storage import BlobStore, current_timestamp_ms

logger = get_logger(__name__)

app = FastAPI(title="JobMatch")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(JobMatchError, jobmatch_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


def get_blob_store() -> BlobStore:
    return BlobStore()


def get_analysis_service(store: BlobStore = Depends(get_blob_store)) -> AnalysisService:
    return AnalysisService(ResumeAnalyzer(GeminiClient()), store)


@app.get("/upload")
async def upload_status():
    return {"message": "Upload endpoint is working"}


@app.post("/upload")
async def upload_resume(
    resume: Optional[UploadFile] = File(None),
    store: BlobStore = Depends(get_blob_store),
):
    """Store an uploaded resume and return its heuristic parse."""
    if resume is None or not resume.filename:
        raise InvalidRequestError("No file uploaded")

    logger.info(f"File received: name={resume.filename} type={resume.content_type}")
    if not is_supported_media_type(resume.content_type):
        raise InvalidRequestError("Please upload a PDF or Word file")

    content = await resume.read()
    timestamp = current_timestamp_ms()

    store.save_upload(resume.filename, content, timestamp)
    text = extract_text(content, resume.content_type)
    logger.info(f"Extracted text length: {len(text)}")

    parsed = parse_resume_text(text, default_recognition_rules())
    store.save_parsed(timestamp, parsed)

    return {"message": "File uploaded and parsed successfully", **parsed.to_json_dict()}


@app.get("/resume")
async def get_resume(store: BlobStore = Depends(get_blob_store)):
    return store.load_latest_parsed().to_json_dict()


@app.get("/resume/analysis", response_model=AnalysisResult)
async def get_latest_analysis(store: BlobStore = Depends(get_blob_store)):
    result = store.load_latest_analysis()
    if result is None:
        raise ResumeNotFoundError("No saved analysis found")
    return result


@app.post("/resume/analyze", response_model=AnalysisResult)
async def analyze_resume(
    request: Request,
    service: AnalysisService = Depends(get_analysis_service),
):
    try:
        body = await request.json()
    except ValueError:
        raise InvalidRequestError("Invalid request body format")

    resume_text = body.get("resumeText") if isinstance(body, dict) else None
    if resume_text is None or resume_text == "":
        raise InvalidRequestError("Resume text is required")
    if not isinstance(resume_text, str):
        raise InvalidRequestError("Resume text must be a string")
    if not resume_text.strip():
        raise InvalidRequestError("Resume text cannot be empty")

    return await service.run(resume_text)


@app.get("/job-matches", response_model=List[Job])
async def get_job_matches(store: BlobStore = Depends(get_blob_store)):
    if not store.has_uploads():
        return []
    return match_jobs()


@app.get("/jobs")
async def get_profile_skills():
    return {"skills": STUB_PROFILE_SKILLS}


@app.get("/skill-tips", response_model=List[SkillTip])
async def get_skill_tips():
    return SKILL_TIPS
