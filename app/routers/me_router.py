# app/routers/me_router.py
from fastapi import APIRouter, Depends

from ..api.deps import get_current_user
from ..application.ports.user_repo import UserRecord
from ..schemas import MeResponse, UserResponse

router = APIRouter(tags=["Profile"])

@router.get("/me", response_model=MeResponse)
def me(current_user: UserRecord = Depends(get_current_user)):
    return MeResponse(user=UserResponse.model_validate(current_user))
