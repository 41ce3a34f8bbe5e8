from typing import List

from fastapi import APIRouter, Depends

from payproof.api.auth import get_current_identity
from payproof.config import settings
from payproof.database import Database, get_db
from payproof.models.invoice import (
    CreateInvoiceRequest,
    Invoice,
    InvoiceActionResponse,
    StatusUpdateRequest,
    UploadProofRequest,
    ValidateRequest,
)
from payproof.models.user import Identity
from payproof.workflow.lifecycle import InvoiceLifecycle

router = APIRouter(prefix="/api/invoices", tags=["Invoices"])

def get_lifecycle(database: Database = Depends(get_db)) -> InvoiceLifecycle:
    return InvoiceLifecycle(
        database.invoices,
        database.users,
        allow_self_invoicing=settings.ALLOW_SELF_INVOICING,
        allow_revalidation=settings.ALLOW_REVALIDATION,
    )

@router.post("/", response_model=Invoice, status_code=201)
async def create_invoice(
    body: CreateInvoiceRequest,
    current_user: Identity = Depends(get_current_identity),
    lifecycle: InvoiceLifecycle = Depends(get_lifecycle)
):
    return await lifecycle.create(current_user, body)

@router.get("/received", response_model=List[Invoice])
async def list_received(
    current_user: Identity = Depends(get_current_identity),
    lifecycle: InvoiceLifecycle = Depends(get_lifecycle)
):
    return await lifecycle.list_received(current_user)

@router.get("/pending", response_model=List[Invoice])
async def list_pending(
    current_user: Identity = Depends(get_current_identity),
    lifecycle: InvoiceLifecycle = Depends(get_lifecycle)
):
    """Received invoices still waiting for a payment proof."""
    return await lifecycle.list_pending_received(current_user)

@router.get("/sent", response_model=List[Invoice])
async def list_sent(
    current_user: Identity = Depends(get_current_identity),
    lifecycle: InvoiceLifecycle = Depends(get_lifecycle)
):
    return await lifecycle.list_sent(current_user)

@router.get("/{invoice_id}", response_model=Invoice)
async def get_invoice(
    invoice_id: str,
    current_user: Identity = Depends(get_current_identity),
    lifecycle: InvoiceLifecycle = Depends(get_lifecycle)
):
    return await lifecycle.get(current_user, invoice_id)

@router.post("/{invoice_id}/upload-proof", response_model=InvoiceActionResponse)
async def upload_proof(
    invoice_id: str,
    body: UploadProofRequest,
    current_user: Identity = Depends(get_current_identity),
    lifecycle: InvoiceLifecycle = Depends(get_lifecycle)
):
    invoice = await lifecycle.upload_proof(current_user, invoice_id, body.image_base64)
    return InvoiceActionResponse(message="Payment proof uploaded", invoice=invoice)

@router.post("/{invoice_id}/validate", response_model=InvoiceActionResponse)
async def validate_invoice(
    invoice_id: str,
    body: ValidateRequest,
    current_user: Identity = Depends(get_current_identity),
    lifecycle: InvoiceLifecycle = Depends(get_lifecycle)
):
    invoice = await lifecycle.validate(current_user, invoice_id, body.status)
    return InvoiceActionResponse(message=f"Invoice marked as {invoice.status.value}", invoice=invoice)

@router.put("/{invoice_id}/status", response_model=InvoiceActionResponse)
async def update_status(
    invoice_id: str,
    body: StatusUpdateRequest,
    current_user: Identity = Depends(get_current_identity),
    lifecycle: InvoiceLifecycle = Depends(get_lifecycle)
):
    invoice = await lifecycle.set_status(current_user, invoice_id, body.status, proof=body.image_base64)
    return InvoiceActionResponse(message="Status updated", invoice=invoice)
