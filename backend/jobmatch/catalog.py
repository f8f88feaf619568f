"""Static sample data served by the demo endpoints."""
from typing import List

from .models import Job, SkillTip

# Sample job data. In a real deployment this would come from a database.
JOB_CATALOG: List[Job] = [
    Job(
        id="1",
        title="Frontend Developer",
        company="TechCorp",
        location="Remote",
        description="Looking for a skilled frontend developer with experience in modern web technologies.",
        skills=["html", "css", "javascript", "react"],
    ),
    Job(
        id="2",
        title="Java Developer",
        company="Enterprise Solutions",
        location="New York, NY",
        description="Seeking a Java developer to work on enterprise applications.",
        skills=["java", "spring", "sql"],
    ),
    Job(
        id="3",
        title="Full Stack Developer",
        company="StartupX",
        location="San Francisco, CA",
        description="Join our dynamic team building innovative web applications.",
        skills=["java", "javascript", "html", "css", "sql"],
    ),
]

# Stand-in for skills read from the user's profile.
STUB_USER_SKILLS = ["java", "html", "css", "sql"]
STUB_PROFILE_SKILLS = ["react", "javascript", "typescript", "node.js"]

SKILL_TIPS: List[SkillTip] = [
    SkillTip(
        category="Technical Skills",
        title="Programming & Development",
        description="Enhance your coding abilities with these resources",
        resources=[
            "FreeCodeCamp - Free interactive coding lessons",
            "LeetCode - Practice coding problems",
            "GitHub - Contribute to open source projects",
            "Udemy - Comprehensive programming courses",
        ],
    ),
    SkillTip(
        category="Soft Skills",
        title="Communication & Leadership",
        description="Develop essential workplace skills",
        resources=[
            "Toastmasters - Public speaking practice",
            "LinkedIn Learning - Professional development courses",
            "Coursera - Leadership and management courses",
            "TED Talks - Learn from industry leaders",
        ],
    ),
    SkillTip(
        category="Industry Knowledge",
        title="Stay Updated",
        description="Keep up with industry trends and developments",
        resources=[
            "Industry newsletters and blogs",
            "Professional networking events",
            "Webinars and online conferences",
            "Industry-specific certifications",
        ],
    ),
    SkillTip(
        category="Project Management",
        title="Agile & Scrum",
        description="Master project management methodologies",
        resources=[
            "Scrum.org - Scrum framework training",
            "PMI - Project Management Institute resources",
            "Agile Alliance - Agile methodology guides",
            "Jira - Practice with project management tools",
        ],
    ),
]
