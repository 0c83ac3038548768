# app/db/models/users/user.py
from typing import List, Optional
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
import uuid

USER_STATUS_ACTIVE = "active"
USER_STATUS_SUSPENDED = "suspended"

class User(SQLModel, table=True):
    __tablename__ = "users"
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    phone_number: str = Field(max_length=20, unique=True, index=True)
    name: Optional[str] = Field(default=None, max_length=255)
    status: str = Field(default=USER_STATUS_ACTIVE, max_length=20)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    otp_codes: List["OtpCode"] = Relationship(back_populates="user")
    sessions: List["UserSession"] = Relationship(back_populates="user")
