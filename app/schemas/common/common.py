# app/schemas/common/common.py
from pydantic import BaseModel
from typing import Dict, List, Optional

class MessageResponse(BaseModel):
    message: str

class ErrorResponse(BaseModel):
    message: str
    errors: Optional[Dict[str, List[str]]] = None

class HealthResponse(BaseModel):
    status: str
    version: str
