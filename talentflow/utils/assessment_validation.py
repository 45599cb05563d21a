"""
Answer validation for assessment responses.

Checks a candidate's answers against the stored assessment questions using
the same rules as the assessment preview form: required answers, numeric
bounds, text length limits, plus membership in the option list for choice
questions.
"""

import math
from typing import Any, Dict, Optional

from talentflow.models.status import QuestionType


def _is_blank(answer: Any) -> bool:
    if answer is None:
        return True
    if isinstance(answer, str) and answer.strip() == "":
        return True
    if isinstance(answer, (list, tuple)) and len(answer) == 0:
        return True
    return False


def _to_number(answer: Any) -> Optional[float]:
    if isinstance(answer, bool):
        return None
    if isinstance(answer, (int, float)):
        try:
            number = float(answer)
        except OverflowError:
            return None
    elif isinstance(answer, str):
        try:
            number = float(answer.strip())
        except ValueError:
            return None
    else:
        return None
    # float() accepts "nan" and "inf"
    if not math.isfinite(number):
        return None
    return number


def _format_bound(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def validate_answer(question: Dict[str, Any], answer: Any) -> Optional[str]:
    """
    Validate one answer against its question.

    Args:
        question: Stored question dict
        answer: The candidate's answer (may be None when unanswered)

    Returns:
        None if valid, error message string if invalid
    """
    if _is_blank(answer):
        if question.get("required"):
            return "This field is required"
        return None

    question_type = question.get("type")

    if question_type == QuestionType.NUMERIC:
        number = _to_number(answer)
        if number is None:
            return "Please enter a valid number"
        minimum = question.get("min")
        maximum = question.get("max")
        if minimum is not None and number < minimum:
            return f"Value must be at least {_format_bound(minimum)}"
        if maximum is not None and number > maximum:
            return f"Value must be at most {_format_bound(maximum)}"

    elif question_type in (QuestionType.SHORT_TEXT, QuestionType.LONG_TEXT):
        if not isinstance(answer, str):
            return "Please enter text"
        max_length = question.get("max_length")
        if max_length and len(answer) > max_length:
            return f"Text must be {max_length} characters or less"

    elif question_type == QuestionType.SINGLE_CHOICE:
        if answer not in (question.get("options") or []):
            return "Please choose one of the available options"

    elif question_type == QuestionType.MULTI_CHOICE:
        if not isinstance(answer, list):
            return "Please choose one or more of the available options"
        options = question.get("options") or []
        if any(choice not in options for choice in answer):
            return "Please choose only from the available options"

    return None


def validate_responses(assessment: Dict[str, Any], responses: Dict[str, Any]) -> Dict[str, str]:
    """
    Validate every answer in a submission.

    Args:
        assessment: Stored assessment record
        responses: Mapping of question id -> answer

    Returns:
        Mapping of question id -> error message (empty if all valid)
    """
    errors: Dict[str, str] = {}
    known_ids = set()

    for section in assessment.get("sections", []):
        for question in section.get("questions", []):
            known_ids.add(question["id"])
            error = validate_answer(question, responses.get(question["id"]))
            if error:
                errors[question["id"]] = error

    for question_id in responses:
        if question_id not in known_ids:
            errors[question_id] = "Unknown question"

    return errors
