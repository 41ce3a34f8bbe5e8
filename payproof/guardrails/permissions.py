from enum import Enum
from typing import Set
import logging

from payproof.errors import Forbidden
from payproof.models.invoice import Invoice, InvoiceStatus
from payproof.models.user import Identity, normalize_email

logger = logging.getLogger(__name__)

class Party(str, Enum):
    ISSUER = "issuer"
    RECIPIENT = "recipient"

# Target status -> the only party allowed to move an invoice there
STATUS_OWNERS = {
    InvoiceStatus.PENDING: Party.ISSUER,
    InvoiceStatus.PROOF_UPLOADED: Party.RECIPIENT,
    InvoiceStatus.PAID: Party.ISSUER,
    InvoiceStatus.REJECTED: Party.ISSUER,
}

DENIAL_MESSAGES = {
    InvoiceStatus.PENDING: "Only the issuer can reset an invoice to Pending",
    InvoiceStatus.PROOF_UPLOADED: "Only the recipient can upload a payment proof",
    InvoiceStatus.PAID: "Only the issuer can mark an invoice Paid or Rejected",
    InvoiceStatus.REJECTED: "Only the issuer can mark an invoice Paid or Rejected",
}

class PermissionChecker:
    def parties(self, invoice: Invoice, identity: Identity) -> Set[Party]:
        """Which sides of the invoice the caller is on (both for a self-invoice)."""
        email = normalize_email(identity.email)
        found = set()
        if normalize_email(invoice.issuer_email) == email:
            found.add(Party.ISSUER)
        if normalize_email(invoice.recipient_email) == email:
            found.add(Party.RECIPIENT)
        return found

    def check_transition(self, invoice: Invoice, identity: Identity, target: InvoiceStatus) -> None:
        """
        Raise Forbidden unless the caller is the party that owns `target`.
        """
        required = STATUS_OWNERS[target]
        if required in self.parties(invoice, identity):
            return
        logger.warning(
            f"User {identity.email} denied moving invoice {invoice.id} to {target.value} "
            f"({required.value} only)"
        )
        raise Forbidden(DENIAL_MESSAGES[target])

    def check_view(self, invoice: Invoice, identity: Identity) -> None:
        if not self.parties(invoice, identity):
            logger.warning(f"User {identity.email} denied access to invoice {invoice.id}")
            raise Forbidden("Only the issuer or the recipient can view this invoice")

permission_checker = PermissionChecker()
