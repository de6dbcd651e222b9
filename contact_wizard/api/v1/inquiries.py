from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status

from contact_wizard.api.v1.schemas import (
    CreateInquiryRequestSchema,
    EstimateRequestSchema,
    FieldUpdateRequestSchema,
    OutcomeSchema,
    RejectionSchema,
    WizardViewSchema,
)
from contact_wizard.application.use_cases.inquiry_wizard import InquiryWizard
from contact_wizard.domain.entities.attachment import CandidateFile
from contact_wizard.wiring.sessions import InquirySessionRegistry, get_session_registry


router = APIRouter()
logger = logging.getLogger(__name__)


def _get_wizard(session_id: str, registry: InquirySessionRegistry) -> InquiryWizard:
    wizard = registry.get(session_id)
    if wizard is None:
        raise HTTPException(status_code=404, detail="Inquiry session not found")
    return wizard


@router.post("", response_model=WizardViewSchema, status_code=status.HTTP_201_CREATED)
async def create_inquiry(
    req: CreateInquiryRequestSchema | None = None,
    registry: InquirySessionRegistry = Depends(get_session_registry),
):
    try:
        session_id, wizard = registry.create(client_id=req.client_id if req else None)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return WizardViewSchema.from_wizard(session_id, wizard)


@router.get("/{session_id}", response_model=WizardViewSchema)
async def get_inquiry(session_id: str, registry: InquirySessionRegistry = Depends(get_session_registry)):
    return WizardViewSchema.from_wizard(session_id, _get_wizard(session_id, registry))


@router.patch("/{session_id}/fields", response_model=WizardViewSchema)
async def update_fields(
    session_id: str,
    req: FieldUpdateRequestSchema,
    registry: InquirySessionRegistry = Depends(get_session_registry),
):
    wizard = _get_wizard(session_id, registry)
    for name, value in req.fields.items():
        try:
            applied = wizard.set_field(name, value)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if not applied:
            raise HTTPException(status_code=409, detail="The form cannot be edited right now")
    return WizardViewSchema.from_wizard(session_id, wizard)


@router.post("/{session_id}/estimate", response_model=WizardViewSchema)
async def append_estimate(
    session_id: str,
    req: EstimateRequestSchema,
    registry: InquirySessionRegistry = Depends(get_session_registry),
):
    wizard = _get_wizard(session_id, registry)
    try:
        estimate = wizard.append_estimate(req.square_meters, req.quality)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if estimate is None:
        raise HTTPException(status_code=409, detail="The form cannot be edited right now")
    return WizardViewSchema.from_wizard(session_id, wizard)


@router.post("/{session_id}/next", response_model=WizardViewSchema)
async def next_step(session_id: str, registry: InquirySessionRegistry = Depends(get_session_registry)):
    wizard = _get_wizard(session_id, registry)
    result = wizard.next()
    return WizardViewSchema.from_wizard(session_id, wizard, moved=result.moved)


@router.post("/{session_id}/back", response_model=WizardViewSchema)
async def previous_step(session_id: str, registry: InquirySessionRegistry = Depends(get_session_registry)):
    wizard = _get_wizard(session_id, registry)
    result = wizard.back()
    return WizardViewSchema.from_wizard(session_id, wizard, moved=result.moved)


@router.post("/{session_id}/reset", response_model=WizardViewSchema)
async def reset_inquiry(session_id: str, registry: InquirySessionRegistry = Depends(get_session_registry)):
    wizard = _get_wizard(session_id, registry)
    wizard.reset()
    return WizardViewSchema.from_wizard(session_id, wizard)


@router.post("/{session_id}/attachments", response_model=WizardViewSchema)
async def upload_attachments(
    session_id: str,
    files: list[UploadFile] = File(...),
    registry: InquirySessionRegistry = Depends(get_session_registry),
):
    wizard = _get_wizard(session_id, registry)
    candidates = [
        CandidateFile(name=f.filename or "", content_type=f.content_type, content=await f.read())
        for f in files
    ]
    report = wizard.add_files(candidates)
    if report is None:
        raise HTTPException(status_code=409, detail="Attachments can only be added on the attachments step")
    return WizardViewSchema.from_wizard(
        session_id,
        wizard,
        rejections=[RejectionSchema(filename=r.filename, reason=r.reason, message=r.message) for r in report.rejections],
    )


@router.delete("/{session_id}/attachments/{index}", response_model=WizardViewSchema)
async def remove_attachment(
    session_id: str,
    index: int,
    registry: InquirySessionRegistry = Depends(get_session_registry),
):
    wizard = _get_wizard(session_id, registry)
    if not wizard.remove_attachment(index):
        raise HTTPException(status_code=404, detail="Attachment not found")
    return WizardViewSchema.from_wizard(session_id, wizard)


@router.post("/{session_id}/submit", response_model=WizardViewSchema)
async def submit_inquiry(session_id: str, registry: InquirySessionRegistry = Depends(get_session_registry)):
    wizard = _get_wizard(session_id, registry)
    outcome = await wizard.submit()
    if outcome is None:
        raise HTTPException(status_code=409, detail="Submission is not available on this step")
    return WizardViewSchema.from_wizard(
        session_id,
        wizard,
        outcome=OutcomeSchema(
            success=outcome.success,
            field_errors=outcome.field_errors,
            transport_failure=outcome.transport_failure,
            token_failure=outcome.token_failure,
            configuration_failure=outcome.configuration_failure,
        ),
    )


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_inquiry(session_id: str, registry: InquirySessionRegistry = Depends(get_session_registry)):
    if not registry.close(session_id):
        raise HTTPException(status_code=404, detail="Inquiry session not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
