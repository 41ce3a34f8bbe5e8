"""
Typed failures raised by the invoice workflow and the identity layer.

Every error carries the HTTP status it maps to and a stable machine-readable
code; the FastAPI handlers in payproof.main turn them into JSON responses.
"""


class PayproofError(Exception):
    status_code: int = 500
    code: str = "internal_error"
    default_detail: str = "Internal server error"

    def __init__(self, detail: str = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


# 401
class Unauthenticated(PayproofError):
    status_code = 401
    code = "unauthenticated"
    default_detail = "Authentication required"


class MissingCredential(Unauthenticated):
    code = "missing_credential"
    default_detail = "Missing authorization token"


class InvalidCredential(Unauthenticated):
    code = "invalid_credential"
    default_detail = "Invalid or expired token"


# 403
class Forbidden(PayproofError):
    status_code = 403
    code = "forbidden"
    default_detail = "Not allowed to perform this action"


# 404
class NotFound(PayproofError):
    status_code = 404
    code = "not_found"
    default_detail = "Resource not found"


class InvoiceNotFound(NotFound):
    code = "invoice_not_found"
    default_detail = "Invoice not found"


class UserNotFound(NotFound):
    code = "user_not_found"
    default_detail = "User not found"


# 400
class InvalidInput(PayproofError):
    status_code = 400
    code = "invalid_input"
    default_detail = "Invalid input"


class MissingFields(InvalidInput):
    code = "missing_fields"
    default_detail = "Missing required fields"

    def __init__(self, fields=None):
        self.fields = list(fields or [])
        detail = None
        if self.fields:
            detail = f"Missing required fields: {', '.join(self.fields)}"
        super().__init__(detail)


class UnknownRecipient(InvalidInput):
    code = "unknown_recipient"
    default_detail = "Recipient email is not registered"


class MissingProof(InvalidInput):
    code = "missing_proof"
    default_detail = "A payment proof image (image_base64) is required"


class InvalidDecision(InvalidInput):
    code = "invalid_decision"
    default_detail = "Invalid decision. Must be 'Paid' or 'Rejected'"


class InvalidStatus(InvalidInput):
    code = "invalid_status"
    default_detail = "Invalid status"


class SelfInvoice(InvalidInput):
    code = "self_invoice"
    default_detail = "An invoice cannot be addressed to its own issuer"


# 409
class Conflict(PayproofError):
    status_code = 409
    code = "conflict"
    default_detail = "Conflict"


class InvalidTransition(Conflict):
    code = "invalid_transition"
    default_detail = "Transition not allowed from the current status"


class ConcurrentModification(Conflict):
    code = "concurrent_modification"
    default_detail = "Invoice was modified by another request, retry"


class EmailAlreadyRegistered(Conflict):
    code = "email_taken"
    default_detail = "Email is already registered"
