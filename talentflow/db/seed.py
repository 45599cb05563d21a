"""
Seed data generator for an empty record store.

Generates jobs, candidates with consistent timelines, and one sample
assessment in a single transaction. Seeding is skipped when any job
already exists, so running it again never duplicates data.
"""

import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from talentflow.db.record_store import RecordStore, StoreTransaction
from talentflow.db.schema import ASSESSMENTS, CANDIDATES, JOBS
from talentflow.db.timeline_recorder import record_application, record_stage_change
from talentflow.models.errors import create_validation_error
from talentflow.models.status import FUNNEL_STAGES, CandidateStage, JobStatus
from talentflow.schemas.assessments import AssessmentPayload
from talentflow.utils.pydantic_error_mapper import parse_model
from talentflow.utils.slug import generate_slug
from talentflow.utils.validation import format_timestamp

logger = logging.getLogger(__name__)

DEFAULT_JOB_COUNT = 25
DEFAULT_CANDIDATE_COUNT = 1000

# Probability that a seeded job is active
ACTIVE_JOB_RATIO = 0.7

JOB_TITLES = [
    "Senior Frontend Developer",
    "Backend Engineer",
    "Full Stack Developer",
    "DevOps Engineer",
    "Product Manager",
    "UX Designer",
    "Data Scientist",
    "Mobile Developer",
    "QA Engineer",
    "Technical Lead",
    "Software Architect",
    "Marketing Manager",
    "Sales Representative",
    "Customer Success Manager",
    "HR Specialist",
    "Financial Analyst",
    "Business Analyst",
    "Project Manager",
    "Content Writer",
    "Graphic Designer",
    "SEO Specialist",
    "Social Media Manager",
    "Operations Manager",
    "Legal Counsel",
    "Security Engineer",
]

JOB_TAGS = [
    "React",
    "Node.js",
    "Python",
    "JavaScript",
    "TypeScript",
    "AWS",
    "Docker",
    "Kubernetes",
    "MongoDB",
    "PostgreSQL",
    "Redis",
    "GraphQL",
    "REST API",
    "Microservices",
    "Agile",
    "Scrum",
    "Remote",
    "Full-time",
    "Contract",
    "Senior",
    "Junior",
    "Mid-level",
    "Leadership",
    "Startup",
    "Enterprise",
]

FIRST_NAMES = [
    "Alex", "Jordan", "Taylor", "Morgan", "Casey", "Riley", "Avery", "Quinn",
    "Sage", "River", "Phoenix", "Rowan", "Skylar", "Cameron", "Drew", "Emery",
    "Finley", "Harper", "Hayden", "Indigo", "Jamie", "Kai", "Lane", "Marley",
    "Nova", "Oakley", "Parker", "Reese", "Tatum", "Blake", "Charlie", "Dakota",
    "Ellis", "Frankie", "Gray", "Hunter", "Jesse", "Kendall", "Logan",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis",
    "Rodriguez", "Martinez", "Hernandez", "Lopez", "Gonzalez", "Wilson", "Anderson",
    "Thomas", "Taylor", "Moore", "Jackson", "Martin", "Lee", "Perez", "Thompson",
    "White", "Harris", "Sanchez", "Clark", "Ramirez", "Lewis", "Robinson", "Walker",
    "Young", "Allen", "King", "Wright", "Scott", "Torres", "Nguyen", "Hill", "Flores",
]

JOB_REQUIREMENTS = [
    "Bachelor's degree in Computer Science or related field",
    "3+ years of relevant experience",
    "Strong problem-solving skills",
    "Excellent communication skills",
]

ALL_STAGES = [stage.value for stage in CandidateStage]

SAMPLE_ASSESSMENT = {
    "title": "Frontend Developer Assessment",
    "sections": [
        {
            "id": "section-1",
            "title": "Technical Skills",
            "questions": [
                {
                    "id": "q1",
                    "type": "single-choice",
                    "question": "Which of the following is a JavaScript framework?",
                    "required": True,
                    "options": ["React", "HTML", "CSS", "Python"],
                    "correct_answer": "React",
                },
                {
                    "id": "q2",
                    "type": "multi-choice",
                    "question": "Select all valid CSS properties:",
                    "required": True,
                    "options": ["color", "background-color", "font-weight", "invalid-prop"],
                    "correct_answers": ["color", "background-color", "font-weight"],
                },
                {
                    "id": "q3",
                    "type": "short-text",
                    "question": "What is your favorite JavaScript library and why?",
                    "required": True,
                    "max_length": 200,
                },
            ],
        },
        {
            "id": "section-2",
            "title": "Experience",
            "questions": [
                {
                    "id": "q4",
                    "type": "long-text",
                    "question": (
                        "Describe a challenging project you worked on and how you "
                        "overcame the difficulties."
                    ),
                    "required": True,
                    "max_length": 1000,
                },
                {
                    "id": "q5",
                    "type": "numeric",
                    "question": "How many years of React experience do you have?",
                    "required": True,
                    "min": 0,
                    "max": 20,
                },
                {
                    "id": "q6",
                    "type": "file-upload",
                    "question": "Please upload your portfolio or code samples",
                    "required": False,
                },
            ],
        },
    ],
}


def _random_moment(rng: random.Random, now: datetime, max_days_ago: float) -> datetime:
    return now - timedelta(seconds=rng.uniform(0, max_days_ago * 24 * 60 * 60))


def _moment_between(rng: random.Random, start: datetime, end: datetime) -> datetime:
    span = max((end - start).total_seconds(), 0.0)
    return start + timedelta(seconds=rng.uniform(0, span))


def stage_path(stage: str, rng: random.Random) -> List[str]:
    """
    Stages a seeded candidate passed through after ``applied``.

    Funnel stages walk the funnel in order; ``rejected`` leaves the funnel
    from a random stage before ``hired``.

    Examples:
        >>> stage_path("tech", random.Random(0))
        ['screen', 'tech']
        >>> stage_path("applied", random.Random(0))
        []
    """
    if stage == CandidateStage.REJECTED:
        exit_index = rng.randrange(len(FUNNEL_STAGES) - 1)
        return [s.value for s in FUNNEL_STAGES[1 : exit_index + 1]] + [stage]
    index = [s.value for s in FUNNEL_STAGES].index(stage)
    return [s.value for s in FUNNEL_STAGES[1 : index + 1]]


def build_jobs(rng: random.Random, count: int, now: datetime) -> List[Dict[str, Any]]:
    jobs = []
    for i in range(count):
        title = rng.choice(JOB_TITLES)
        created_at = format_timestamp(_random_moment(rng, now, 90))
        jobs.append(
            {
                "id": f"job-{i + 1}",
                "title": title,
                "slug": f"{generate_slug(title)}-{i + 1}",
                "status": (
                    JobStatus.ACTIVE.value
                    if rng.random() < ACTIVE_JOB_RATIO
                    else JobStatus.ARCHIVED.value
                ),
                "order": i,
                "tags": rng.sample(JOB_TAGS, rng.randint(2, 6)),
                "description": (
                    f"We are looking for a talented {title} to join our growing team. "
                    "This is an exciting opportunity to work with cutting-edge "
                    "technologies and make a real impact."
                ),
                "requirements": list(JOB_REQUIREMENTS),
                "created_at": created_at,
                "updated_at": created_at,
            }
        )
    return jobs


def _seed_candidate(
    txn: StoreTransaction,
    rng: random.Random,
    index: int,
    jobs: List[Dict[str, Any]],
    now: datetime,
) -> int:
    """Insert one candidate with its timeline; returns the number of events."""
    first_name = rng.choice(FIRST_NAMES)
    last_name = rng.choice(LAST_NAMES)
    name = f"{first_name} {last_name}"
    stage = rng.choice(ALL_STAGES)
    path = stage_path(stage, rng)

    applied_moment = _random_moment(rng, now, 60)
    applied_at = format_timestamp(applied_moment)

    # Each stage change lands after the previous event
    moments = []
    previous = applied_moment
    for _ in path:
        previous = _moment_between(rng, previous, now)
        moments.append(format_timestamp(previous))

    candidate = {
        "id": f"candidate-{index + 1}",
        "name": name,
        "email": f"{first_name.lower()}.{last_name.lower()}@email.com",
        "job_id": rng.choice(jobs)["id"],
        "stage": stage,
        "applied_at": applied_at,
        "updated_at": moments[-1] if moments else applied_at,
        "resume": f"Resume for {name}",
        "notes": [],
    }
    txn.put(CANDIDATES, candidate)
    record_application(txn, candidate, applied_at)

    current = CandidateStage.APPLIED.value
    for next_stage, timestamp in zip(path, moments):
        record_stage_change(txn, candidate["id"], current, next_stage, timestamp)
        current = next_stage

    return 1 + len(path)


def seed_database(
    store: RecordStore,
    rng: Optional[random.Random] = None,
    job_count: int = DEFAULT_JOB_COUNT,
    candidate_count: int = DEFAULT_CANDIDATE_COUNT,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Populate an empty store with sample data.

    Args:
        store: Open record store
        rng: Random source; pass a seeded ``random.Random`` for reproducible data
        job_count: Number of jobs to create
        candidate_count: Number of candidates to spread across the jobs
        now: Reference time for generated timestamps (defaults to the current time)

    Returns:
        Summary dict: {"seeded": bool, "jobs": int, "candidates": int,
        "timeline_events": int, "assessments": int}

    Raises:
        ToolError: VALIDATION_ERROR for negative counts, or candidates without jobs
    """
    if job_count < 0 or candidate_count < 0:
        raise create_validation_error(
            f"Seed counts must be non-negative (jobs={job_count}, candidates={candidate_count})"
        )
    if job_count == 0 and candidate_count > 0:
        raise create_validation_error("Cannot seed candidates without at least one job")

    rng = rng or random.Random()
    now = now or datetime.now(timezone.utc)

    with store.transaction() as txn:
        existing = txn.count(JOBS)
        if existing > 0:
            logger.info("Seed skipped: store already holds %d jobs", existing)
            return {
                "seeded": False,
                "jobs": existing,
                "candidates": txn.count(CANDIDATES),
                "timeline_events": 0,
                "assessments": 0,
            }

        jobs = build_jobs(rng, job_count, now)
        for job in jobs:
            txn.put(JOBS, job)

        event_count = 0
        for i in range(candidate_count):
            event_count += _seed_candidate(txn, rng, i, jobs, now)

        assessment_count = 0
        if jobs:
            payload = parse_model(AssessmentPayload, SAMPLE_ASSESSMENT)
            txn.put(
                ASSESSMENTS,
                {
                    "job_id": jobs[0]["id"],
                    **payload.to_record_fields(),
                    "updated_at": format_timestamp(now),
                },
            )
            assessment_count = 1

    logger.info(
        "Seeded %d jobs, %d candidates, %d timeline events",
        len(jobs),
        candidate_count,
        event_count,
    )
    return {
        "seeded": True,
        "jobs": len(jobs),
        "candidates": candidate_count,
        "timeline_events": event_count,
        "assessments": assessment_count,
    }
