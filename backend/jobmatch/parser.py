import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from . import config
from .logging_utils import get_logger
from .models import EducationEntry, ExperienceEntry, ParsedResume

logger = get_logger(__name__)

UNKNOWN_NAME = "Unknown"

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
PHONE_PATTERN = re.compile(r"(?:\+\d{1,3}[-. ]?)?\(?\d{3}\)?[-. ]?\d{3}[-. ]?\d{4}")
NAME_LINE_PATTERN = re.compile(r"^[A-Z][A-Z\s]{2,}$")
YEAR_PATTERN = re.compile(r"20\d{2}")

NAME_EXCLUDED_KEYWORDS = ["EDUCATION", "EXPERIENCE", "SKILLS", "SUMMARY", "CONTACT"]

EDU_KEYWORDS = [
    "B.TECH", "Bachelor", "Master", "PhD", "B.S.", "M.S.", "B.A.", "M.A.",
    "Degree", "College", "University",
]
INSTITUTION_KEYWORDS = ["College", "University"]

DESCRIPTION_EXCLUDED_KEYWORDS = ["CERTIFICATES", "EDUCATION", "SKILLS", "LANGUAGES"]
MIN_DESCRIPTION_LENGTH = 6

EDUCATION = "education"
EXPERIENCE = "experience"
OTHER = "other"

# Headers that end whichever section is open.
SECTION_KEYWORDS = [
    "EDUCATION", "EXPERIENCE", "INTERNSHIP", "SKILLS", "CERTIFICATES",
    "CERTIFICATIONS", "LANGUAGES", "PROJECTS", "SUMMARY", "CONTACT",
    "ACHIEVEMENTS", "AWARDS", "INTERESTS", "HOBBIES", "OBJECTIVE", "PROFILE",
    "REFERENCES", "PUBLICATIONS", "ACTIVITIES",
]
MAX_HEADER_WORDS = 4

BASE_SKILLS = [
    # Programming languages
    "javascript", "python", "java", "typescript", "c++", "c#", "ruby", "scala",
    "php", "swift", "kotlin", "go", "rust", "perl", "r", "matlab", "shell",
    "powershell", "bash",
    # Frontend
    "html", "css", "react", "angular", "vue", "redux", "jquery", "bootstrap",
    "sass", "less", "webpack", "babel", "tailwind", "material-ui",
    "styled-components", "next.js", "gatsby",
    # Backend
    "node.js", "express", "django", "flask", "spring", "asp.net",
    "ruby on rails", "laravel", "fastapi", "graphql", "rest api",
    "microservices", "websocket",
    # Databases
    "sql", "mongodb", "postgresql", "mysql", "oracle", "redis",
    "elasticsearch", "dynamodb", "cassandra", "firebase", "mariadb", "sqlite",
    # Cloud & DevOps
    "aws", "azure", "gcp", "docker", "kubernetes", "jenkins", "gitlab",
    "terraform", "ansible", "circleci", "nginx", "apache", "linux", "windows",
    "serverless",
    # Tools & version control
    "git", "github", "bitbucket", "jira", "confluence", "trello", "slack",
    "postman", "swagger",
    # Methodologies & concepts
    "agile", "scrum", "kanban", "ci/cd", "tdd", "oop", "mvc", "rest", "soap",
    "design patterns",
    # Testing
    "jest", "mocha", "cypress", "selenium", "junit", "pytest", "testng",
    "karma", "jasmine",
    # AI/ML
    "machine learning", "deep learning", "tensorflow", "pytorch",
    "scikit-learn", "pandas", "numpy",
    # Mobile
    "android", "ios", "react native", "flutter", "xamarin", "ionic",
]

SKILL_SYNONYMS = {
    "nodejs": "node.js",
    "nextjs": "next.js",
    "vuejs": "vue.js",
    "dotnet": ".net",
    "aspnet": "asp.net",
}


@dataclass(frozen=True)
class RecognitionRules:
    """Anchors the line heuristics rely on.

    ``known_names`` are full names recognised anywhere in a line,
    ``known_employers`` start experience entries, and ``duration_years``
    mark the line holding an entry's date range.
    """

    known_names: Tuple[str, ...] = ()
    known_employers: Tuple[str, ...] = ()
    duration_years: Tuple[str, ...] = ("2024",)
    experience_markers: Tuple[str, ...] = ("INTERNSHIP", "EXPERIENCE")
    position_markers: Tuple[str, ...] = ("INTERN",)
    section_keywords: Tuple[str, ...] = field(default_factory=lambda: tuple(SECTION_KEYWORDS))


def default_recognition_rules() -> RecognitionRules:
    return RecognitionRules(
        known_names=tuple(config.RESUME_KNOWN_NAMES),
        known_employers=tuple(config.RESUME_KNOWN_EMPLOYERS),
        duration_years=tuple(config.RESUME_DURATION_YEARS),
    )


def _title_case(line: str) -> str:
    return " ".join(word[:1] + word[1:].lower() for word in line.split(" "))


def _contains_any(line: str, keywords: Sequence[str]) -> bool:
    return any(keyword in line for keyword in keywords)


def section_of(line: str, rules: RecognitionRules) -> Optional[str]:
    """Classify a line as a section header, or return None for body text.

    Any short line mentioning education or an experience marker opens that
    section whatever its case (``Education Details``). Other headers must be
    fully upper-case or consist of a single keyword (``Skills:``).
    """
    stripped = line.strip()
    if not stripped or len(stripped.split()) > MAX_HEADER_WORDS:
        return None

    normalized = stripped.rstrip(":").strip().upper()
    if "EDUCATION" in normalized:
        return EDUCATION
    if _contains_any(normalized, rules.experience_markers):
        return EXPERIENCE

    is_caps = stripped == stripped.upper()
    if not is_caps and normalized not in rules.section_keywords:
        return None
    if _contains_any(normalized, rules.section_keywords):
        return OTHER
    return None


def extract_email(text: str) -> Optional[str]:
    match = EMAIL_PATTERN.search(text)
    return match.group(0) if match else None


def extract_phone(text: str) -> Optional[str]:
    match = PHONE_PATTERN.search(text)
    return match.group(0) if match else None


def extract_name(text: str, rules: Optional[RecognitionRules] = None) -> Optional[str]:
    rules = rules or default_recognition_rules()
    for line in text.splitlines():
        line = line.strip()

        for known in rules.known_names:
            if known.upper() in line.upper():
                return _title_case(known.upper())

        if (
            NAME_LINE_PATTERN.match(line)
            and not _contains_any(line, NAME_EXCLUDED_KEYWORDS)
            and len(line.split(" ")) >= 2
        ):
            return _title_case(line)
    return None


def extract_education(text: str, rules: Optional[RecognitionRules] = None) -> List[EducationEntry]:
    rules = rules or default_recognition_rules()
    lines = text.splitlines()
    education: List[EducationEntry] = []
    current: Optional[EducationEntry] = None
    section = None

    def flush():
        if current is not None and current.degree:
            education.append(current)

    for i, raw in enumerate(lines):
        line = raw.strip()

        header = section_of(line, rules)
        if header is not None:
            section = header
            continue
        if section != EDUCATION:
            continue

        upper = line.upper()
        if "CGPA" in line or any(keyword.upper() in upper for keyword in EDU_KEYWORDS):
            flush()
            current = EducationEntry()

            if "B.TECH" in line or "B.E." in line:
                current.degree = "B.TECH"

            for next_line in lines[i + 1:i + 3]:
                next_line = next_line.strip()
                if _contains_any(next_line, INSTITUTION_KEYWORDS):
                    current.institution = next_line
                    break

            year = YEAR_PATTERN.search(line)
            if year:
                current.year = year.group(0)

    flush()
    return education


def extract_experience(text: str, rules: Optional[RecognitionRules] = None) -> List[ExperienceEntry]:
    rules = rules or default_recognition_rules()
    lines = text.splitlines()
    experience: List[ExperienceEntry] = []
    current: Optional[ExperienceEntry] = None
    description: List[str] = []
    section = None

    def flush():
        if current is not None:
            current.description = " ".join(description).strip()
            experience.append(current)

    for i, raw in enumerate(lines):
        line = raw.strip()
        if not line:
            continue

        header = section_of(line, rules)
        if header is not None:
            if section == EXPERIENCE and header != EXPERIENCE:
                flush()
                current, description = None, []
            section = header
            continue
        if section != EXPERIENCE:
            continue

        employer = next((name for name in rules.known_employers if name in line), None)
        if employer is not None:
            flush()
            current, description = ExperienceEntry(company=employer), []

            if i + 1 < len(lines) and _contains_any(lines[i + 1], rules.position_markers):
                current.position = lines[i + 1].strip()

            for date_line in lines[max(i - 2, 0):i + 3]:
                if _contains_any(date_line, rules.duration_years):
                    current.duration = date_line.strip()
                    break
        elif current is not None:
            if (
                not _contains_any(line, DESCRIPTION_EXCLUDED_KEYWORDS)
                and len(line) >= MIN_DESCRIPTION_LENGTH
            ):
                description.append(line)

    flush()
    return experience


def extract_skills(text: str) -> List[str]:
    text_lower = text.lower()
    found: List[str] = []
    for skill in BASE_SKILLS:
        if skill in text_lower and skill not in found:
            found.append(skill)
    for variant, standard in SKILL_SYNONYMS.items():
        if variant in text_lower and standard not in found:
            found.append(standard)
    return found


def parse_resume_text(text: str, rules: Optional[RecognitionRules] = None) -> ParsedResume:
    """Run every heuristic extractor over ``text``.

    Fields that cannot be found come back empty; the name falls back to
    ``UNKNOWN_NAME``.
    """
    rules = rules or default_recognition_rules()

    parsed = ParsedResume(
        name=extract_name(text, rules) or UNKNOWN_NAME,
        email=extract_email(text) or "",
        phone=extract_phone(text) or "",
        education=extract_education(text, rules),
        experience=extract_experience(text, rules),
        skills=extract_skills(text),
        text=text,
    )

    logger.debug(
        "Parsed resume: name=%s email=%s phone=%s education=%d experience=%d skills=%d",
        parsed.name, parsed.email, parsed.phone,
        len(parsed.education), len(parsed.experience), len(parsed.skills),
    )
    return parsed
