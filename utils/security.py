"""
RecipeShare Security Utilities
Password hashing and HTTP security helpers
"""

import secrets
from typing import Dict
import bcrypt

from core.config import settings


class SecurityUtils:
    def __init__(self, rounds: int = None):
        self.rounds = rounds or settings.BCRYPT_ROUNDS
        self.token_length = 32

    def hash_password(self, password: str) -> str:
        """Hash password using bcrypt"""
        salt = bcrypt.gensalt(rounds=self.rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify_password(self, password: str, hashed: str) -> bool:
        """Verify password against bcrypt hash"""
        try:
            return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    def generate_secure_token(self, length: int = None) -> str:
        """Generate cryptographically secure random token"""
        return secrets.token_urlsafe(length or self.token_length)

    def get_security_headers(self, hsts: bool = False) -> Dict[str, str]:
        """Get recommended security headers"""
        headers = {
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": "DENY",
            "X-XSS-Protection": "1; mode=block",
            "Content-Security-Policy": "default-src 'self'",
            "Referrer-Policy": "strict-origin-when-cross-origin",
            "Permissions-Policy": "camera=(), microphone=(), location=()",
        }
        if hsts:
            headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return headers


security_utils = SecurityUtils()
