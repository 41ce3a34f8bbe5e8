"""
Conversion of invoice documents written by the first deployment.

Those records used camelCase field names, Spanish status labels and kept the
document date in `date` (defaulted to insertion time).
"""
from datetime import datetime
from typing import Any, Dict

from payproof.models.invoice import InvoiceStatus
from payproof.models.user import normalize_email

FIELD_MAP = {
    "toUserEmail": "recipient_email",
    "createdBy": "issuer_name",
    "createdByEmail": "issuer_email",
    "paymentImage": "payment_proof",
}

def is_legacy_document(doc: Dict[str, Any]) -> bool:
    return any(key in doc for key in FIELD_MAP) or "__v" in doc

def from_legacy_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Return a copy of `doc` in the current invoice schema. `_id` is preserved."""
    converted: Dict[str, Any] = {}
    for key, value in doc.items():
        if key == "__v":
            continue
        converted[FIELD_MAP.get(key, key)] = value

    for key in ("recipient_email", "issuer_email"):
        if converted.get(key):
            converted[key] = normalize_email(converted[key])
    converted.setdefault("issuer_name", converted.get("issuer_email") or "")

    status = InvoiceStatus.parse(converted.get("status") or "")
    converted["status"] = (status or InvoiceStatus.PENDING).value

    # `date` defaulted to Date.now, so it is the best creation time available
    date = converted.pop("date", None)
    if isinstance(date, datetime):
        converted.setdefault("invoice_date", date)
        converted.setdefault("created_at", date)
    converted.setdefault("created_at", datetime.utcnow())
    converted.setdefault("updated_at", converted["created_at"])

    converted["history"] = [
        {
            "action": entry.get("action") or "",
            "actor_email": entry.get("actor_email") or entry.get("by") or "",
            "timestamp": entry.get("timestamp") or entry.get("date") or converted["created_at"],
        }
        for entry in (converted.get("history") or [])
    ]
    converted.setdefault("version", 0)
    return converted
