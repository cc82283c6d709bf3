# api/routes/forms.py
from fastapi import APIRouter, Depends, status

from api.core.logging import get_structlog_logger
from api.schemas.form import FormSubmission, FormSubmissionError, FormSubmissionResponse
from api.services.form_ingest import ingest_submission
from api.services.sheets import SheetsClient, get_sheets_client

router = APIRouter()


@router.post(
    "/submit-form",
    response_model=FormSubmissionResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": FormSubmissionError},
        500: {"model": FormSubmissionError},
    },
    summary="Append a questionnaire submission to the lead type's sheet",
)
async def submit_form(
    submission: FormSubmission,
    sheets: SheetsClient = Depends(get_sheets_client),
) -> FormSubmissionResponse:
    logger = get_structlog_logger().bind(route="/api/submit-form", action="submit")

    payload = submission.payload()
    logger.info(
        "form.received",
        user_type=submission.userType,
        answer_count=len(submission.model_extra or {}),
    )

    result = await ingest_submission(sheets, payload)

    logger.info("form.appended", user_type=result.lead_type)
    return FormSubmissionResponse(data=result.data)
