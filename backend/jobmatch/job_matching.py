import math
from typing import Iterable, List, Optional

from .catalog import JOB_CATALOG, STUB_USER_SKILLS
from .models import Job


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def match_percentage(job_skills: Iterable[str], user_skills: Iterable[str]) -> int:
    job_skills = list(job_skills)
    if not job_skills:
        return 0
    user = {skill.lower() for skill in user_skills}
    matching = [skill for skill in job_skills if skill.lower() in user]
    return _round_half_up(len(matching) / len(job_skills) * 100)


def match_jobs(
    user_skills: Optional[Iterable[str]] = None,
    catalog: Optional[List[Job]] = None,
) -> List[Job]:
    """Score each catalog job against ``user_skills``.

    Jobs with no overlap are dropped; the rest are ordered best match first.
    """
    user_skills = list(STUB_USER_SKILLS if user_skills is None else user_skills)
    catalog = JOB_CATALOG if catalog is None else catalog

    matched = [
        job.model_copy(update={"match_percentage": match_percentage(job.skills, user_skills)})
        for job in catalog
    ]
    matched.sort(key=lambda job: job.match_percentage, reverse=True)
    return [job for job in matched if job.match_percentage > 0]
