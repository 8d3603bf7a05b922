"""
Submission API: reservation and order endpoints

Flow:
  1. Read the body (JSON or form-encoded)
  2. Validate it against the submission schema
  3. Hand it to the admission controller
  4. Form posts are redirected back to the website; JSON callers get a status code
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Tuple, Type

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError

from infrastructure.constants import (
    ORDER_REDIRECT_FRAGMENT,
    REDIRECT_CAPACITY,
    REDIRECT_INVALID,
    REDIRECT_SUCCESS,
    REDIRECT_UNAVAILABLE,
    RESERVATION_REDIRECT_FRAGMENT,
)
from reservations.errors import CapacityExceededError, StoreUnavailableError
from reservations.models import RequestKind
from reservations.services import AdmissionController
from webapp.schemas import OrderSubmission, ReservationSubmission, SubmissionBase, SubmissionResponse

logger = logging.getLogger('SubmissionAPI')
router = APIRouter(tags=["submissions"])

_REDIRECT_FRAGMENTS = {
    RequestKind.RESERVATION: RESERVATION_REDIRECT_FRAGMENT,
    RequestKind.ORDER: ORDER_REDIRECT_FRAGMENT,
}


def get_admission(request: Request) -> AdmissionController:
    return request.app.state.admission


def get_frontend_url(request: Request) -> str:
    return request.app.state.frontend_url


async def read_payload(request: Request) -> Tuple[Dict[str, Any], bool]:
    """Return the submitted fields and whether they came from an HTML form."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Request body must be a JSON object.",
            )
        return body, False

    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}, True


def redirect_to_site(frontend_url: str, kind: RequestKind, outcome: str) -> RedirectResponse:
    fragment = _REDIRECT_FRAGMENTS[kind].format(outcome=outcome)
    return RedirectResponse(f"{frontend_url}/{fragment}", status_code=status.HTTP_303_SEE_OTHER)


async def submit(
    request: Request,
    kind: RequestKind,
    schema: Type[SubmissionBase],
    admission: AdmissionController,
    frontend_url: str,
):
    payload, from_form = await read_payload(request)

    try:
        submission = schema.model_validate(payload)
    except ValidationError as exc:
        logger.info("Rejected %s submission: %d validation error(s)", kind.value, exc.error_count())
        if from_form:
            return redirect_to_site(frontend_url, kind, REDIRECT_INVALID)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False),
        )

    try:
        admitted = await admission.try_admit(kind, submission.to_fields())
    except CapacityExceededError as exc:
        if from_form:
            return redirect_to_site(frontend_url, kind, REDIRECT_CAPACITY)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except StoreUnavailableError as exc:
        logger.error("Store unavailable while admitting %s: %s", kind.value, exc)
        if from_form:
            return redirect_to_site(frontend_url, kind, REDIRECT_UNAVAILABLE)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not record the request right now. Please retry.",
        )
    except ValueError as exc:
        if from_form:
            return redirect_to_site(frontend_url, kind, REDIRECT_INVALID)
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))

    if from_form:
        return redirect_to_site(frontend_url, kind, REDIRECT_SUCCESS)

    body = SubmissionResponse(id=admitted.id, kind=admitted.kind.value, status=admitted.status.value)
    return JSONResponse(content=body.model_dump(), status_code=status.HTTP_201_CREATED)


@router.post("/reservations")
@router.post("/reservas", include_in_schema=False)
async def create_reservation(
    request: Request,
    admission: AdmissionController = Depends(get_admission),
    frontend_url: str = Depends(get_frontend_url),
):
    """Submit a table reservation; subject to the per-slot capacity limit."""
    return await submit(request, RequestKind.RESERVATION, ReservationSubmission, admission, frontend_url)


@router.post("/orders")
@router.post("/pedidos", include_in_schema=False)
async def create_order(
    request: Request,
    admission: AdmissionController = Depends(get_admission),
    frontend_url: str = Depends(get_frontend_url),
):
    """Submit a pickup order; orders are never capacity-limited."""
    return await submit(request, RequestKind.ORDER, OrderSubmission, admission, frontend_url)
