import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

import jwt

from payproof.errors import InvalidCredential, MissingCredential
from payproof.models.user import Identity

logger = logging.getLogger(__name__)

PBKDF2_ITERATIONS = 260_000

def hash_password(password: str, iterations: int = PBKDF2_ITERATIONS) -> str:
    """PBKDF2-SHA256, stored as `pbkdf2_sha256$<iterations>$<salt>$<hex digest>`."""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), iterations)
    return f"pbkdf2_sha256${iterations}${salt}${digest.hex()}"

def verify_password(password: str, stored: str) -> bool:
    try:
        algorithm, iterations, salt, expected = stored.split("$")
    except (AttributeError, ValueError):
        return False
    if algorithm != "pbkdf2_sha256":
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), int(iterations))
    return hmac.compare_digest(digest.hex(), expected)

def extract_token(header: Optional[str]) -> Optional[str]:
    """Accept both `Bearer <token>` and a bare token."""
    parts = (header or "").split(None, 1)
    if not parts:
        return None
    if parts[0].lower() == "bearer":
        return parts[1].strip() if len(parts) > 1 else None
    return header.strip()

class TokenService:
    """Issues and verifies the signed access tokens that identify callers."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60 * 24):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user_id: str, email: str) -> str:
        now = datetime.utcnow()
        payload = {
            "sub": user_id,
            "email": email,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, credential: Optional[str]) -> Identity:
        token = extract_token(credential)
        if not token:
            raise MissingCredential()
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise InvalidCredential("Token has expired")
        except jwt.PyJWTError as e:
            logger.info(f"Rejected token: {e}")
            raise InvalidCredential()

        user_id = payload.get("sub")
        email = payload.get("email")
        if not user_id or not email:
            raise InvalidCredential()
        return Identity(id=user_id, email=email)
