from typing import Optional
from payproof.repositories.base import BaseRepository
from payproof.models.user import User, normalize_email

class UserRepository(BaseRepository[User]):
    async def get_by_email(self, email: str) -> Optional[User]:
        return await self.get_by_field("email", normalize_email(email))
