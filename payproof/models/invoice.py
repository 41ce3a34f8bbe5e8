from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from payproof.models.base import MongoModel

class InvoiceStatus(str, Enum):
    PENDING = "Pending"
    PROOF_UPLOADED = "ProofUploaded"
    PAID = "Paid"
    REJECTED = "Rejected"

    @classmethod
    def parse(cls, raw: str) -> Optional["InvoiceStatus"]:
        """
        Resolve a caller-supplied status label, or None when it is not one of ours.
        Surrounding whitespace is ignored and the labels used by the first
        deployment are accepted as aliases.
        """
        if not isinstance(raw, str):
            return None
        label = raw.strip()
        try:
            return cls(label)
        except ValueError:
            return LEGACY_STATUS_LABELS.get(label)

# Labels stored by the Spanish-language deployment
LEGACY_STATUS_LABELS = {
    "Pendiente": InvoiceStatus.PENDING,
    "Comprobante Subido": InvoiceStatus.PROOF_UPLOADED,
    "Pagada": InvoiceStatus.PAID,
    "Rechazada": InvoiceStatus.REJECTED,
}

FINAL_STATUSES = {InvoiceStatus.PAID, InvoiceStatus.REJECTED}

class HistoryEntry(BaseModel):
    """One sanctioned lifecycle transition."""
    action: str
    actor_email: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)

class Invoice(MongoModel):
    """
    An invoice issued by one user to another, with its proof-of-payment workflow.
    """
    issuer_email: str
    issuer_name: str
    recipient_email: str

    price: float = Field(..., gt=0, allow_inf_nan=False)
    service: str
    comments: Optional[str] = None

    status: InvoiceStatus = Field(default=InvoiceStatus.PENDING)
    payment_proof: Optional[str] = Field(None, description="Base64 encoded image")
    history: List[HistoryEntry] = Field(default_factory=list)

    invoice_date: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    version: int = 0

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "issuer_email": "alice@example.com",
                "issuer_name": "Alice",
                "recipient_email": "bob@example.com",
                "price": 100.0,
                "service": "Consulting",
                "status": "Pending",
                "history": []
            }
        }
    )

    @field_validator("status", mode="before")
    @classmethod
    def accept_legacy_status(cls, v):
        if isinstance(v, str) and not isinstance(v, InvoiceStatus):
            return InvoiceStatus.parse(v) or v
        return v

    def record(self, action: str, actor_email: str, at: datetime) -> HistoryEntry:
        """Append a history entry for a transition performed by actor_email."""
        entry = HistoryEntry(action=action, actor_email=actor_email, timestamp=at)
        self.history.append(entry)
        self.updated_at = at
        return entry

# Request Models
class CreateInvoiceRequest(BaseModel):
    recipient_email: Optional[str] = Field(None, description="Registered email of the payer")
    price: Optional[float] = None
    service: Optional[str] = None
    comments: Optional[str] = None
    date: Optional[datetime] = Field(None, description="Document date printed on the invoice")

class UploadProofRequest(BaseModel):
    image_base64: Optional[str] = None

class ValidateRequest(BaseModel):
    status: Optional[str] = Field(None, description="'Paid' or 'Rejected'")

class StatusUpdateRequest(BaseModel):
    status: Optional[str] = None
    image_base64: Optional[str] = None

class InvoiceActionResponse(BaseModel):
    message: str
    invoice: Invoice
