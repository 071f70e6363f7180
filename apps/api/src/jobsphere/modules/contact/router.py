"""Contact router."""

from fastapi import APIRouter

from jobsphere.modules.contact import service
from jobsphere.modules.contact.schemas import ContactRequest, ContactResponse
from jobsphere.modules.shared import ServiceError, to_http_exception

router = APIRouter()


@router.post("", response_model=ContactResponse)
async def submit_contact(data: ContactRequest) -> ContactResponse:
    """
    Send a message to the site administrator.

    Raises:
        HTTPException 500: No recipient configured
        HTTPException 502: The message could not be delivered
    """
    try:
        await service.submit_contact_message(data)
    except ServiceError as e:
        raise to_http_exception(e) from e
    return ContactResponse()
