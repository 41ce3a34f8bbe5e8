import logging
from motor.motor_asyncio import AsyncIOMotorClient
from payproof.config import settings
from payproof.repositories.invoice import InvoiceRepository
from payproof.repositories.user import UserRepository
from payproof.models.invoice import Invoice
from payproof.models.user import User

logger = logging.getLogger(__name__)

class Database:
    client: AsyncIOMotorClient = None

    # Repositories
    invoices: InvoiceRepository = None
    users: UserRepository = None

    def connect(self, url: str = None, db_name: str = None):
        """Initialize database connection and repositories."""
        self.client = AsyncIOMotorClient(url or settings.MONGODB_URL)
        db = self.client[db_name or settings.DB_NAME]

        self.invoices = InvoiceRepository(db.invoices, Invoice)
        self.users = UserRepository(db.users, User)

        logger.info("Connected to MongoDB")

    def close(self):
        """Close database connection."""
        if self.client:
            self.client.close()
            self.client = None
            logger.info("Disconnected from MongoDB")

db = Database()

async def get_db() -> Database:
    """Dependency for FastAPI."""
    return db
