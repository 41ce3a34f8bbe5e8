import logging
import math
from datetime import datetime
from typing import Callable, List, Optional

from payproof.errors import (
    ConcurrentModification,
    InvalidDecision,
    InvalidInput,
    InvalidStatus,
    InvoiceNotFound,
    MissingFields,
    MissingProof,
    SelfInvoice,
    UnknownRecipient,
    UserNotFound,
)
from payproof.guardrails.permissions import PermissionChecker, permission_checker
from payproof.models.invoice import CreateInvoiceRequest, Invoice, InvoiceStatus
from payproof.models.user import Identity, normalize_email
from payproof.repositories.invoice import InvoiceRepository
from payproof.repositories.user import UserRepository
from payproof.workflow import state

logger = logging.getLogger(__name__)

class InvoiceLifecycle:
    """
    Issues invoices and moves them through Pending -> ProofUploaded -> Paid/Rejected.

    Every mutation is a read-modify-write: load the invoice, check that the
    caller is the right party and that the current status allows the move,
    append one history entry and save. Saves are conditional on the version
    that was read, so a concurrent writer surfaces as ConcurrentModification
    instead of being overwritten.
    """

    def __init__(self,
                 invoices: InvoiceRepository,
                 users: UserRepository,
                 permissions: PermissionChecker = permission_checker,
                 allow_self_invoicing: bool = False,
                 allow_revalidation: bool = True,
                 clock: Callable[[], datetime] = datetime.utcnow):
        self.invoices = invoices
        self.users = users
        self.permissions = permissions
        self.allow_self_invoicing = allow_self_invoicing
        self.allow_revalidation = allow_revalidation
        self.clock = clock

    async def create(self, actor: Identity, request: CreateInvoiceRequest) -> Invoice:
        recipient_email = normalize_email(request.recipient_email)
        service = (request.service or "").strip()

        missing = [name for name, value in (
            ("recipient_email", recipient_email),
            ("price", request.price),
            ("service", service),
        ) if not value]
        if missing:
            raise MissingFields(missing)
        if not math.isfinite(request.price) or request.price <= 0:
            raise InvalidInput("Price must be a positive amount")

        issuer = await self.users.get(actor.id)
        if not issuer:
            raise UserNotFound("Issuer account not found")

        recipient = await self.users.get_by_email(recipient_email)
        if not recipient:
            raise UnknownRecipient(f"No registered user with email {recipient_email}")

        if recipient.email == issuer.email and not self.allow_self_invoicing:
            raise SelfInvoice()

        now = self.clock()
        invoice = Invoice(
            issuer_email=issuer.email,
            issuer_name=issuer.name,
            recipient_email=recipient.email,
            price=request.price,
            service=service,
            comments=request.comments,
            invoice_date=request.date or now,
            status=InvoiceStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        await self.invoices.create(invoice)
        logger.info(f"Invoice {invoice.id} issued by {issuer.email} to {recipient.email} for {invoice.price}")
        return invoice

    async def upload_proof(self, actor: Identity, invoice_id: str, proof: Optional[str]) -> Invoice:
        if not proof or not proof.strip():
            raise MissingProof()

        invoice = await self._load(invoice_id)
        self.permissions.check_transition(invoice, actor, InvoiceStatus.PROOF_UPLOADED)
        state.assert_upload_proof(invoice.status)

        invoice.payment_proof = proof
        return await self._transition(invoice, actor, InvoiceStatus.PROOF_UPLOADED, state.UPLOAD_PROOF_ACTION)

    async def validate(self, actor: Identity, invoice_id: str, decision: Optional[str]) -> Invoice:
        target = state.parse_decision(decision)
        if target is None:
            raise InvalidDecision()

        invoice = await self._load(invoice_id)
        self.permissions.check_transition(invoice, actor, target)
        state.assert_validate(invoice.status, self.allow_revalidation)

        return await self._transition(invoice, actor, target, state.validate_action(target))

    async def set_status(self,
                         actor: Identity,
                         invoice_id: str,
                         requested: Optional[str],
                         proof: Optional[str] = None) -> Invoice:
        """
        Generic status change kept for older clients. Same role rules as the
        dedicated actions, but no check on the current status.
        """
        if not requested or not requested.strip():
            raise InvalidStatus("Status is required")
        target = InvoiceStatus.parse(requested)
        if target is None:
            raise InvalidStatus(f"Invalid status: {requested.strip()}")

        invoice = await self._load(invoice_id)
        self.permissions.check_transition(invoice, actor, target)

        if target == InvoiceStatus.PROOF_UPLOADED:
            if proof and proof.strip():
                invoice.payment_proof = proof
            elif not invoice.payment_proof:
                raise MissingProof()

        return await self._transition(invoice, actor, target, state.set_status_action(target))

    async def get(self, actor: Identity, invoice_id: str) -> Invoice:
        invoice = await self._load(invoice_id)
        self.permissions.check_view(invoice, actor)
        return invoice

    async def list_received(self, actor: Identity) -> List[Invoice]:
        return await self.invoices.list_received(normalize_email(actor.email))

    async def list_pending_received(self, actor: Identity) -> List[Invoice]:
        return await self.invoices.list_received(normalize_email(actor.email), status=InvoiceStatus.PENDING)

    async def list_sent(self, actor: Identity) -> List[Invoice]:
        return await self.invoices.list_sent(normalize_email(actor.email))

    async def _load(self, invoice_id: str) -> Invoice:
        invoice = await self.invoices.get(invoice_id)
        if not invoice:
            raise InvoiceNotFound()
        return invoice

    async def _transition(self, invoice: Invoice, actor: Identity, target: InvoiceStatus, action: str) -> Invoice:
        previous = invoice.status
        invoice.status = target
        invoice.record(action, normalize_email(actor.email), self.clock())

        saved = await self.invoices.save(invoice)
        if saved is None:
            if await self.invoices.get(invoice.id) is None:
                raise InvoiceNotFound()
            logger.warning(f"Invoice {invoice.id} changed concurrently, dropping {action} by {actor.email}")
            raise ConcurrentModification()

        logger.info(f"Invoice {invoice.id}: {previous.value} -> {target.value} ({action} by {actor.email})")
        return saved
