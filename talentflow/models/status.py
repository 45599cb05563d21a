"""
Centralized, type-safe enumerations for the TalentFlow pipeline.

This module is the single source of truth for the categorical values stored
in records:

- ``JobStatus``: whether a job posting is open or archived.
- ``CandidateStage``: a candidate's position in the hiring funnel.
- ``TimelineAction``: the kind of event appended to a candidate timeline.
- ``QuestionType``: the supported assessment question kinds.

All Enums inherit from ``(str, Enum)`` so that members compare equal to plain
strings and serialize naturally to JSON at the tool boundary.
"""

from enum import Enum


class JobStatus(str, Enum):
    """Enum for job posting statuses."""

    ACTIVE = "active"
    ARCHIVED = "archived"


class CandidateStage(str, Enum):
    """Enum for candidate funnel stages.

    Funnel order:
        applied -> screen -> tech -> offer -> hired
    ``rejected`` is the terminal exit and can be reached from any stage.
    """

    APPLIED = "applied"
    SCREEN = "screen"
    TECH = "tech"
    OFFER = "offer"
    HIRED = "hired"
    REJECTED = "rejected"


# Funnel progression, excluding the rejected exit
FUNNEL_STAGES = [
    CandidateStage.APPLIED,
    CandidateStage.SCREEN,
    CandidateStage.TECH,
    CandidateStage.OFFER,
    CandidateStage.HIRED,
]


class TimelineAction(str, Enum):
    """Enum for timeline event kinds."""

    APPLIED = "applied"
    STAGE_CHANGE = "stage_change"


class QuestionType(str, Enum):
    """Enum for assessment question types."""

    SINGLE_CHOICE = "single-choice"
    MULTI_CHOICE = "multi-choice"
    SHORT_TEXT = "short-text"
    LONG_TEXT = "long-text"
    NUMERIC = "numeric"
    FILE_UPLOAD = "file-upload"


CHOICE_QUESTION_TYPES = {QuestionType.SINGLE_CHOICE, QuestionType.MULTI_CHOICE}
TEXT_QUESTION_TYPES = {QuestionType.SHORT_TEXT, QuestionType.LONG_TEXT}
