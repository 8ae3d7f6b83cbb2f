"""
RecipeShare Authentication Service
JWT issuance/verification, registration, login and password changes
"""

from datetime import timedelta
from typing import Optional, Dict, Any, Tuple
import structlog
from jose import JWTError, jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import run_in_transaction
from core.exceptions import AuthenticationError, ConflictError, ValidationFailedError
from models.user import User
from schemas.auth_schemas import UserCreate, UserLogin, TokenResponse, PasswordChange
from utils.date_utils import utcnow
from utils.security import security_utils

logger = structlog.get_logger()


class AuthService:
    def __init__(self):
        self.security_utils = security_utils

        # JWT settings
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.access_token_expire_minutes = settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
        self.refresh_token_expire_days = settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash"""
        return self.security_utils.verify_password(plain_password, hashed_password)

    def get_password_hash(self, password: str) -> str:
        """Hash a password"""
        return self.security_utils.hash_password(password)

    def _token_claims(self, user: User) -> Dict[str, Any]:
        role = user.role.value if hasattr(user.role, "value") else user.role
        return {"sub": str(user.id), "email": user.email, "role": role}

    def create_access_token(
        self,
        data: Dict[str, Any],
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """Create JWT access token"""
        to_encode = data.copy()
        now = utcnow()
        expire = now + (expires_delta or timedelta(minutes=self.access_token_expire_minutes))

        to_encode.update({
            "exp": expire,
            "iat": now,
            "type": "access"
        })

        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def create_refresh_token(self, data: Dict[str, Any]) -> str:
        """Create JWT refresh token"""
        to_encode = data.copy()
        now = utcnow()
        expire = now + timedelta(days=self.refresh_token_expire_days)

        to_encode.update({
            "exp": expire,
            "iat": now,
            "type": "refresh",
            "jti": self.security_utils.generate_secure_token()
        })

        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str, token_type: str = "access") -> Dict[str, Any]:
        """Verify and decode JWT token"""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])

            if payload.get("type") != token_type:
                raise JWTError("Invalid token type")

            if not payload.get("sub"):
                raise JWTError("Token has no subject")

            return payload

        except JWTError as e:
            raise AuthenticationError(f"Invalid token: {str(e)}")

    def issue_tokens(self, user: User) -> TokenResponse:
        claims = self._token_claims(user)
        return TokenResponse(
            access_token=self.create_access_token(claims),
            refresh_token=self.create_refresh_token(claims),
            token_type="bearer",
            expires_in=self.access_token_expire_minutes * 60
        )

    async def get_user_by_email(self, email: str, db: AsyncSession) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def register_user(self, user_data: UserCreate, db: AsyncSession) -> Tuple[User, TokenResponse]:
        """Register a new user and issue a token pair"""
        if await self.get_user_by_email(user_data.email, db):
            logger.info("Registration rejected", reason="user_exists")
            raise ConflictError("User with this email already exists")

        user = User(
            email=user_data.email.lower(),
            password_hash=self.get_password_hash(user_data.password),
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            phone=user_data.phone,
            street=user_data.street,
            city=user_data.city,
            state=user_data.state,
        )

        async with run_in_transaction(db):
            db.add(user)
            await db.flush()

        logger.info("User registered", user_id=user.id)
        return user, self.issue_tokens(user)

    async def authenticate_user(self, login_data: UserLogin, db: AsyncSession) -> Tuple[User, TokenResponse]:
        """Check credentials and issue a token pair"""
        user = await self.get_user_by_email(login_data.email, db)

        if not user or not self.verify_password(login_data.password, user.password_hash):
            logger.warning("Login failed", reason="invalid_credentials")
            raise AuthenticationError("Invalid email or password")

        if not user.is_active:
            logger.warning("Login failed", reason="account_disabled", user_id=user.id)
            raise AuthenticationError("Account is disabled. Please contact support.")

        async with run_in_transaction(db):
            user.last_login_at = utcnow()

        logger.info("User logged in", user_id=user.id)
        return user, self.issue_tokens(user)

    async def refresh_access_token(self, refresh_token: str, db: AsyncSession) -> TokenResponse:
        """Exchange a refresh token for a new access token"""
        payload = self.verify_token(refresh_token, "refresh")
        user = await self.get_user_by_id(payload["sub"], db)

        if not user or not user.is_active:
            raise AuthenticationError("User not found or inactive")

        return TokenResponse(
            access_token=self.create_access_token(self._token_claims(user)),
            refresh_token=refresh_token,  # Keep same refresh token
            token_type="bearer",
            expires_in=self.access_token_expire_minutes * 60
        )

    async def change_password(self, user: User, data: PasswordChange, db: AsyncSession) -> None:
        if not self.verify_password(data.current_password, user.password_hash):
            raise AuthenticationError("Current password is incorrect")

        if data.current_password == data.new_password:
            raise ValidationFailedError(
                "New password must be different from current password",
                [{"field": "new_password", "message": "must differ from current password"}],
            )

        async with run_in_transaction(db):
            user.password_hash = self.get_password_hash(data.new_password)

        logger.info("Password changed", user_id=user.id)

    async def get_user_by_id(self, user_id: Any, db: AsyncSession) -> Optional[User]:
        try:
            user_id = int(user_id)
        except (TypeError, ValueError):
            return None
        return await db.get(User, user_id)

    async def get_current_user(self, token: str, db: AsyncSession) -> Optional[User]:
        """Resolve the user behind an access token"""
        payload = self.verify_token(token, "access")
        return await self.get_user_by_id(payload["sub"], db)


# Global auth service instance
auth_service = AuthService()
