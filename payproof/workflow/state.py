from typing import Optional

from payproof.errors import InvalidTransition
from payproof.models.invoice import InvoiceStatus, FINAL_STATUSES

# Statuses from which the recipient may (re)submit a proof
PROOF_UPLOAD_FROM = {InvoiceStatus.PENDING, InvoiceStatus.PROOF_UPLOADED}

# Issuer decisions on an uploaded proof
DECISIONS = {InvoiceStatus.PAID, InvoiceStatus.REJECTED}

UPLOAD_PROOF_ACTION = "upload-proof"


def can_upload_proof(current: InvoiceStatus) -> bool:
    return current in PROOF_UPLOAD_FROM


def can_validate(current: InvoiceStatus, allow_revalidation: bool = True) -> bool:
    if current == InvoiceStatus.PROOF_UPLOADED:
        return True
    return allow_revalidation and current in FINAL_STATUSES


def assert_upload_proof(current: InvoiceStatus) -> None:
    if not can_upload_proof(current):
        raise InvalidTransition(f"Cannot upload a proof for an invoice that is {current.value}")


def assert_validate(current: InvoiceStatus, allow_revalidation: bool = True) -> None:
    if can_validate(current, allow_revalidation):
        return
    if current == InvoiceStatus.PENDING:
        raise InvalidTransition("No payment proof has been uploaded yet")
    raise InvalidTransition(f"Invoice is already {current.value}")


def parse_decision(raw: Optional[str]) -> Optional[InvoiceStatus]:
    status = InvoiceStatus.parse(raw) if raw else None
    return status if status in DECISIONS else None


def validate_action(decision: InvoiceStatus) -> str:
    return f"validate-{decision.value}"


def set_status_action(status: InvoiceStatus) -> str:
    return f"status-{status.value}"
