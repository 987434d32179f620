"""Parsing endpoints: bulk paste preview and natural-language quick-add."""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from api.dependencies import get_client_ip, verify_api_key
from api.logging import RequestLog, record_http_error, record_unexpected_error, write_request_log
from api.models import (
    BulkParseResponse,
    BulkTextRequest,
    DraftResponse,
    ErrorCodes,
    NaturalTextRequest,
)
from core.config import MAX_BULK_TEXT_CHARS
from models.events import NoTitle, Parsed
from services.bulk_parser import parse_bulk_with_report
from services.natural_language import parse_natural_language_result

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])


def check_text_size(text: str) -> None:
    if len(text) > MAX_BULK_TEXT_CHARS:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={
                "error": f"Text exceeds maximum size of {MAX_BULK_TEXT_CHARS} characters",
                "code": ErrorCodes.TEXT_TOO_LARGE,
                "details": [f"Received: {len(text)} characters"],
            },
        )


@router.post(
    "/parse/bulk",
    response_model=BulkParseResponse,
    response_model_exclude_none=True,
)
def parse_bulk_endpoint(body: BulkTextRequest, request: Request):
    """
    Preview the drafts a bulk paste would create.

    Lines without a recognizable date are skipped and counted.
    """
    request_log = RequestLog(
        endpoint="/v1/parse/bulk",
        method="POST",
        client_ip=get_client_ip(request),
    )
    try:
        check_text_size(body.text)
        drafts, received, skipped = parse_bulk_with_report(
            body.text, clip_to_operating_year=body.clip_to_operating_year
        )

        request_log.lines_received = received
        request_log.drafts_produced = len(drafts)
        for line in skipped:
            request_log.details.append(("warning", f"No date found: {line}"))
        request_log.finish(200)

        return BulkParseResponse(
            drafts=[DraftResponse.model_validate(d.to_dict()) for d in drafts],
            lines_received=received,
            lines_skipped=len(skipped),
        )

    except HTTPException as e:
        record_http_error(request_log, e)
        raise

    except Exception as e:
        record_unexpected_error(request_log, e)
        raise

    finally:
        write_request_log(request_log)


@router.post(
    "/parse/natural",
    response_model=DraftResponse,
    response_model_exclude_none=True,
)
def parse_natural_endpoint(body: NaturalTextRequest):
    """
    Parse a quick-add sentence such as "Team Meeting tomorrow 2-4pm".

    Returns 422 UNPARSEABLE when no date or no title could be extracted.
    """
    result = parse_natural_language_result(body.text)
    if isinstance(result, Parsed):
        return DraftResponse.model_validate(result.draft.to_dict())

    hint = (
        "Add a title to the date and time"
        if isinstance(result, NoTitle)
        else "Try a date like 'tomorrow', '15 Oct', 'Oct 15-17' or '12/1'"
    )
    raise HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={
            "error": "Could not parse event, try a different phrasing",
            "code": ErrorCodes.UNPARSEABLE,
            "details": [result.reason, hint],
        },
    )
