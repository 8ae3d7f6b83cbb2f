"""
RecipeShare Authentication Schemas
Pydantic models for authentication requests and user responses
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from models.user import UserRole


def _validate_password_strength(v: str) -> str:
    if len(v.encode("utf-8")) > 72:
        raise ValueError("Password must be at most 72 bytes long")

    has_upper = any(c.isupper() for c in v)
    has_lower = any(c.islower() for c in v)
    has_digit = any(c.isdigit() for c in v)

    if not (has_upper and has_lower and has_digit):
        raise ValueError("Password must contain uppercase, lowercase, and number")

    return v


class UserBase(BaseModel):
    """Base user schema with common fields"""
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_names(cls, v):
        return v.strip() if isinstance(v, str) else v


class UserCreate(UserBase):
    """Schema for user registration"""
    password: str = Field(..., min_length=8, max_length=72)
    phone: Optional[str] = Field(None, max_length=20)
    street: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        """Validate password strength"""
        return _validate_password_strength(v)


class UserLogin(BaseModel):
    """Schema for user login"""
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Schema for authentication token response"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenRefresh(BaseModel):
    """Schema for token refresh request"""
    refresh_token: str


class PasswordChange(BaseModel):
    """Schema for password change"""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=72)

    @field_validator("new_password")
    @classmethod
    def validate_new_password(cls, v):
        """Validate new password strength"""
        return _validate_password_strength(v)


class PublicUser(BaseModel):
    """Profile fields visible to anyone"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    created_at: datetime


class User(PublicUser):
    """Schema for the authenticated user's own profile"""
    email: EmailStr
    phone: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    role: UserRole
    is_active: bool
    updated_at: datetime
    last_login_at: Optional[datetime] = None


class AdminUserSummary(BaseModel):
    """Row of the admin user listing"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: EmailStr
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool
    created_at: datetime
    last_login_at: Optional[datetime] = None


class UserUpdate(BaseModel):
    """Schema for user profile updates"""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    bio: Optional[str] = Field(None, max_length=1000)
    profile_image: Optional[str] = Field(None, max_length=500)
    phone: Optional[str] = Field(None, max_length=20)
    street: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)


class AuthData(BaseModel):
    """Payload of register/login responses"""
    user: User
    tokens: TokenResponse


class UserStats(BaseModel):
    """Activity counters for a user"""
    recipe_count: int
    published_recipe_count: int
    feedback_count: int
    collection_count: int
    favorite_count: int
    average_rating_received: float
