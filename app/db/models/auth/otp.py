# app/db/models/auth/otp.py
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Index
from datetime import datetime
from typing import Optional

class OtpCode(SQLModel, table=True):
    __tablename__ = "otp_codes"
    __table_args__ = (
        Index("ix_otp_codes_user_active", "user_id", "used_at", "expires_at"),
    )
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(foreign_key="users.id")
    code_hash: str = Field(max_length=255)
    kind: str = Field(default="login", max_length=20)
    expires_at: datetime
    used_at: Optional[datetime] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    user: Optional["User"] = Relationship(back_populates="otp_codes")
