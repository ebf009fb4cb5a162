# portfolio_api/modules/contact/contact_controller.py

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from portfolio_api.common.rate_limit import client_address
from portfolio_api.modules.contact import schemas
from portfolio_api.modules.contact.contact_service import ContactService

router = APIRouter(prefix="/api/contact", tags=["contact"])


def get_contact_service(request: Request) -> ContactService:
    return request.app.state.contact_service


@router.post(
    "",
    response_model=schemas.ContactFormResponse,
    responses={
        400: {"model": schemas.ContactFormResponse},
        429: {"model": schemas.ContactFormResponse},
        500: {"model": schemas.ContactFormResponse},
    },
)
async def submit_contact_form(
    request: Request,
    service: ContactService = Depends(get_contact_service),
):
    """
    Process a contact form submission.

    The body is read raw so that the contact quota is enforced before any
    validation happens; a body that is not valid JSON counts as empty.
    """
    try:
        raw = await request.json()
    except ValueError:
        raw = {}

    client_key = client_address(request, request.app.state.settings.TRUSTED_PROXY_HOPS)
    result = await service.submit(raw, client_key)
    return JSONResponse(
        status_code=result.status_code,
        content=result.to_response().model_dump(exclude_none=True),
    )
