"""CSV rendering of survey responses."""

import csv
import io
from typing import Any, Iterable, Optional

from survey_service.models.response import Response
from survey_service.schemas.question import Question

FIXED_COLUMNS = ["Response ID", "Completed At", "Respondent Email", "Respondent Name"]


def format_answer(answer: Any) -> str:
    """Flatten a stored answer into a single cell."""
    if answer is None:
        return ""
    if isinstance(answer, list):
        return "; ".join(str(item) for item in answer)
    return str(answer)


def render_csv(questions: list[Question], responses: Iterable[Response]) -> str:
    """Render responses as CSV, one row per response and one column per question.

    Responses must have their `respondent` relationship loaded.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(FIXED_COLUMNS + [q.question for q in questions])

    for response in responses:
        respondent = response.respondent
        email: Optional[str] = respondent.email if respondent else None
        name: Optional[str] = respondent.name if respondent else None
        writer.writerow(
            [
                response.id,
                response.completed_at.isoformat(),
                email or "",
                name or "",
            ]
            + [format_answer(response.answers.get(q.id)) for q in questions]
        )

    return buffer.getvalue()


def export_filename(survey_id: int) -> str:
    return f"survey-{survey_id}-responses.csv"
