from datetime import datetime
from pydantic import BaseModel, Field
from payproof.models.base import MongoModel

class User(MongoModel):
    """
    Registered account. Also serves as the directory entry invoices are addressed to.
    """
    name: str
    email: str
    password_hash: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

    def public(self) -> "UserPublic":
        return UserPublic(id=self.id, name=self.name, email=self.email)

class UserPublic(BaseModel):
    id: str
    name: str
    email: str

class Identity(BaseModel):
    """Caller identity resolved from a verified token."""
    id: str
    email: str

# Request Models
class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)

class LoginRequest(BaseModel):
    email: str
    password: str

class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserPublic

def normalize_email(email: str) -> str:
    return (email or "").strip().lower()
