from payproof.models.base import MongoModel
from payproof.models.invoice import Invoice, InvoiceStatus, HistoryEntry, CreateInvoiceRequest, UploadProofRequest, ValidateRequest, StatusUpdateRequest, InvoiceActionResponse
from payproof.models.user import User, UserPublic, Identity, RegisterRequest, LoginRequest, TokenResponse
