import copy
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId

from payproof.models.invoice import Invoice, InvoiceStatus
from payproof.models.user import Identity, User, normalize_email
from payproof.security import hash_password
from payproof.workflow.lifecycle import InvoiceLifecycle


class InMemoryInvoiceRepository:
    """Same surface as InvoiceRepository, backed by a dict of stored documents."""

    def __init__(self):
        self.docs: Dict[str, Dict[str, Any]] = {}

    async def get(self, id: str) -> Optional[Invoice]:
        doc = self.docs.get(id)
        return Invoice.from_mongo(copy.deepcopy(doc)) if doc else None

    async def create(self, invoice: Invoice) -> Invoice:
        invoice.id = str(ObjectId())
        self.docs[invoice.id] = copy.deepcopy(invoice.to_mongo())
        return invoice

    async def save(self, invoice: Invoice) -> Optional[Invoice]:
        stored = self.docs.get(invoice.id)
        if stored is None or stored.get("version", 0) != invoice.version:
            return None
        invoice.version += 1
        self.docs[invoice.id] = copy.deepcopy(invoice.to_mongo())
        return invoice

    async def _find(self, **criteria) -> List[Invoice]:
        found = [
            Invoice.from_mongo(copy.deepcopy(doc)) for doc in self.docs.values()
            if all(doc.get(k) == v for k, v in criteria.items())
        ]
        return sorted(found, key=lambda i: i.created_at, reverse=True)

    async def list_received(self, recipient_email: str, status: Optional[InvoiceStatus] = None) -> List[Invoice]:
        if status:
            return await self._find(recipient_email=recipient_email, status=status)
        return await self._find(recipient_email=recipient_email)

    async def list_sent(self, issuer_email: str) -> List[Invoice]:
        return await self._find(issuer_email=issuer_email)


class InMemoryUserRepository:
    def __init__(self):
        self.users: Dict[str, User] = {}

    async def get(self, id: str) -> Optional[User]:
        return self.users.get(id)

    async def get_by_email(self, email: str) -> Optional[User]:
        email = normalize_email(email)
        return next((u for u in self.users.values() if u.email == email), None)

    async def create(self, user: User) -> User:
        user.id = str(ObjectId())
        self.users[user.id] = user
        return user


class InMemoryDatabase:
    def __init__(self):
        self.invoices = InMemoryInvoiceRepository()
        self.users = InMemoryUserRepository()


async def add_user(users: InMemoryUserRepository, name: str, email: str, password: str = "secret123") -> Identity:
    user = await users.create(User(name=name, email=email, password_hash=hash_password(password, iterations=1000)))
    return Identity(id=user.id, email=user.email)


@pytest.fixture
def database():
    return InMemoryDatabase()

@pytest.fixture
def lifecycle(database):
    return InvoiceLifecycle(database.invoices, database.users)

@pytest.fixture
async def alice(database):
    return await add_user(database.users, "Alice", "alice@x.com")

@pytest.fixture
async def bob(database):
    return await add_user(database.users, "Bob", "bob@x.com")

@pytest.fixture
async def carol(database):
    return await add_user(database.users, "Carol", "carol@x.com")
