from datetime import datetime
from typing import List, Optional
from payproof.repositories.base import BaseRepository, to_object_id
from payproof.models.invoice import Invoice, InvoiceStatus

class InvoiceRepository(BaseRepository[Invoice]):

    async def list_received(self, recipient_email: str, status: Optional[InvoiceStatus] = None) -> List[Invoice]:
        """Invoices addressed to recipient_email, newest first."""
        filter = {"recipient_email": recipient_email}
        if status:
            filter["status"] = status.value
        return await self.find(filter, sort_key="created_at", descending=True)

    async def list_sent(self, issuer_email: str) -> List[Invoice]:
        """Invoices issued by issuer_email, newest first."""
        return await self.find({"issuer_email": issuer_email}, sort_key="created_at", descending=True)

    async def save(self, invoice: Invoice) -> Optional[Invoice]:
        """
        Persist a modified invoice if nobody saved it since it was read.

        The write only matches the version the caller loaded; on success the
        version is bumped. Returns None when the id is unknown or stale.
        """
        oid = to_object_id(invoice.id)
        if oid is None:
            return None
        expected = invoice.version
        data = invoice.to_mongo()
        data.pop("_id", None)
        data["version"] = expected + 1
        filter = {"_id": oid, "version": expected}
        if expected == 0:
            # Records written before versioning have no field at all
            filter["version"] = {"$in": [0, None]}
        result = await self.collection.update_one(filter, {"$set": data})
        if result.matched_count == 0:
            return None
        invoice.version = expected + 1
        return invoice
