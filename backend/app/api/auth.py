"""
Authentication API endpoints for Barplas Portal
Login and session refresh happen against Supabase Auth directly; the API only
exposes the resolved caller.
"""
from fastapi import APIRouter, Depends

from app.core.auth import TokenUser, get_current_user

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


@router.get("/me")
async def get_me(user: TokenUser = Depends(get_current_user)):
    """Current user with role"""
    return {
        "status": "success",
        "data": {
            "id": user.id,
            "email": user.email,
            "name": user.name,
            "role": user.role,
            "is_admin": user.is_admin,
        }
    }
