"""
Authentication middleware for Barplas Portal Backend
Validates Supabase Auth JWT tokens and resolves the caller's role from
the `comerciales` table
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel

from app.core.config import settings
from app.repositories.comercial_repository import ComercialRepository

logger = logging.getLogger(__name__)


# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

# Role hierarchy: admin > comercial
ROLE_HIERARCHY = {
    "admin": 2,
    "comercial": 1,
}


class TokenUser(BaseModel):
    """Authenticated portal user"""
    id: str
    email: str
    name: Optional[str] = None
    role: str = "comercial"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def scope(self) -> Optional[str]:
        """comercial_id filter for repositories (None = everything)"""
        return None if self.is_admin else self.id


class AuthConfig:
    """Authentication configuration"""

    @staticmethod
    def get_jwt_secret() -> str:
        """Get the Supabase JWT secret from settings"""
        secret = settings.SUPABASE_JWT_SECRET
        if not secret:
            raise ValueError("SUPABASE_JWT_SECRET is not set")
        return secret

    @staticmethod
    def get_jwt_algorithm() -> str:
        # Supabase signs access tokens with HS256
        return "HS256"

    @staticmethod
    def get_audience() -> str:
        return "authenticated"


def decode_supabase_token(token: str) -> dict:
    """
    Decode and validate a Supabase access token.

    Supabase JWT structure:
    {
        "sub": "auth user id",
        "email": "ana@barplas.com",
        "aud": "authenticated",
        "role": "authenticated",
        "exp": 1234567890,
        "iat": 1234567890
    }
    """
    try:
        return jwt.decode(
            token,
            AuthConfig.get_jwt_secret(),
            algorithms=[AuthConfig.get_jwt_algorithm()],
            audience=AuthConfig.get_audience(),
        )
    except JWTError as e:
        error_msg = str(e).lower()
        if "expired" in error_msg:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has expired",
                headers={"WWW-Authenticate": "Bearer"}
            )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"}
        )


def get_comercial_repository() -> ComercialRepository:
    return ComercialRepository()


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    repo: ComercialRepository = Depends(get_comercial_repository),
) -> TokenUser:
    """
    Dependency that validates the token and loads the caller's profile.

    Usage:
        @router.get("/protected")
        async def protected_route(user: TokenUser = Depends(get_current_user)):
            return {"message": f"Hello {user.email}"}
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"}
        )

    payload = decode_supabase_token(credentials.credentials)

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload: missing user id",
            headers={"WWW-Authenticate": "Bearer"}
        )

    comercial = repo.find_by_id(user_id)
    if not comercial:
        logger.warning(f"Authenticated user {user_id} has no comerciales profile")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is not registered as a commercial"
        )
    if not comercial.activo:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User is inactive"
        )

    return TokenUser(
        id=comercial.id,
        email=comercial.email or payload.get("email", ""),
        name=comercial.nombre,
        role=comercial.role
    )


def require_role(required_role: str):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.delete("/comerciales/{comercial_id}")
        async def delete_comercial(
            comercial_id: str,
            user: TokenUser = Depends(require_role("admin"))
        ):
            # Only admins can delete commercials
            pass
    """
    async def role_checker(
        user: TokenUser = Depends(get_current_user)
    ) -> TokenUser:
        user_level = ROLE_HIERARCHY.get(user.role, 0)
        required_level = ROLE_HIERARCHY.get(required_role, 0)

        if user_level < required_level:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {required_role}, your role: {user.role}"
            )

        return user

    return role_checker


# Convenience dependencies for common role requirements
require_admin = require_role("admin")
require_comercial = require_role("comercial")
