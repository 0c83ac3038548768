# app/schemas/auth/auth.py
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from ...application.validation import normalize_phone_number, validate_otp

class RequestOTPRequest(BaseModel):
    phone_number: str = Field(..., description="Phone number with country code, e.g. +15551234567")

    @field_validator('phone_number', mode='before')
    @classmethod
    def validate_phone(cls, v):
        return normalize_phone_number(v)

class RequestOTPResponse(BaseModel):
    message: str
    sms_sent: bool

class VerifyOTPRequest(BaseModel):
    phone_number: str = Field(..., description="Phone number with country code")
    otp: str = Field(..., description="6-digit OTP")

    @field_validator('phone_number', mode='before')
    @classmethod
    def validate_phone(cls, v):
        return normalize_phone_number(v)

    @field_validator('otp', mode='before')
    @classmethod
    def validate_otp(cls, v):
        return validate_otp(v)

class UserResponse(BaseModel):
    id: str
    phone_number: str
    name: Optional[str] = None
    status: str
    created_at: datetime

    class Config:
        from_attributes = True

class VerifyOTPResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserResponse

class MeResponse(BaseModel):
    user: UserResponse
