"""Email template API endpoints: CRUD over the stored escalation templates."""
import logging

from fastapi import APIRouter, HTTPException, status

from freightdesk.core.deps import StoreDep
from freightdesk.core.exceptions import NotFoundError, PersistenceError
from freightdesk.schemas.email_template import (
    EmailTemplateCreate,
    EmailTemplateRecord,
    EmailTemplateUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[EmailTemplateRecord], summary="List email templates")
async def list_email_templates(store: StoreDep):
    return await store.list_email_templates()


@router.get("/{template_id}", response_model=EmailTemplateRecord, summary="Get an email template")
async def get_email_template(template_id: str, store: StoreDep):
    template = await store.get_email_template(template_id)
    if template is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Email template not found.")
    return template


@router.post(
    "",
    response_model=EmailTemplateRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Create an email template",
)
async def create_email_template(body: EmailTemplateCreate, store: StoreDep):
    try:
        return await store.create_email_template(body)
    except PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.patch("/{template_id}", response_model=EmailTemplateRecord, summary="Partially update an email template")
async def update_email_template(template_id: str, body: EmailTemplateUpdate, store: StoreDep):
    if not body.model_dump(exclude_unset=True):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update.")
    try:
        return await store.update_email_template(template_id, body)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Email template not found.")


@router.delete(
    "/{template_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an email template",
)
async def delete_email_template(template_id: str, store: StoreDep):
    if not await store.delete_email_template(template_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Email template not found.")
    logger.info("Email template %s deleted", template_id)
