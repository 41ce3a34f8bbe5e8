import pytest
from payproof.errors import InvalidTransition
from payproof.models.invoice import InvoiceStatus
from payproof.workflow import state

def test_upload_allowed_until_decided():
    state.assert_upload_proof(InvoiceStatus.PENDING)
    state.assert_upload_proof(InvoiceStatus.PROOF_UPLOADED)
    with pytest.raises(InvalidTransition):
        state.assert_upload_proof(InvoiceStatus.PAID)
    with pytest.raises(InvalidTransition):
        state.assert_upload_proof(InvoiceStatus.REJECTED)

def test_validate_needs_proof():
    with pytest.raises(InvalidTransition, match="No payment proof"):
        state.assert_validate(InvoiceStatus.PENDING)
    state.assert_validate(InvoiceStatus.PROOF_UPLOADED)

def test_revalidation_switch():
    assert state.can_validate(InvoiceStatus.PAID) is True
    assert state.can_validate(InvoiceStatus.REJECTED) is True
    assert state.can_validate(InvoiceStatus.PAID, allow_revalidation=False) is False
    with pytest.raises(InvalidTransition, match="already Paid"):
        state.assert_validate(InvoiceStatus.PAID, allow_revalidation=False)

def test_parse_decision():
    assert state.parse_decision("Paid") == InvoiceStatus.PAID
    assert state.parse_decision(" Rejected ") == InvoiceStatus.REJECTED
    assert state.parse_decision("Pagada") == InvoiceStatus.PAID
    assert state.parse_decision("Pending") is None
    assert state.parse_decision(None) is None

def test_history_labels():
    assert state.UPLOAD_PROOF_ACTION == "upload-proof"
    assert state.validate_action(InvoiceStatus.REJECTED) == "validate-Rejected"
    assert state.set_status_action(InvoiceStatus.PROOF_UPLOADED) == "status-ProofUploaded"

def test_status_parse():
    assert InvoiceStatus.parse(" ProofUploaded\n") == InvoiceStatus.PROOF_UPLOADED
    assert InvoiceStatus.parse("Comprobante Subido") == InvoiceStatus.PROOF_UPLOADED
    assert InvoiceStatus.parse("Cancelled") is None
    assert InvoiceStatus.parse(42) is None
