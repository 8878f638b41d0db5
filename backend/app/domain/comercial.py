"""
Commercial Domain Model

A commercial (sales representative) or administrator of the portal
(table `comerciales`). The row id is the Supabase auth user id.

Author: TM3
Date: 2025-08-09
"""
from pydantic import BaseModel, Field, ConfigDict, EmailStr, field_validator
from typing import Optional
from datetime import datetime


ROLE_ADMIN = 'admin'
ROLE_COMERCIAL = 'comercial'
ROLES = [ROLE_ADMIN, ROLE_COMERCIAL]


class Comercial(BaseModel):
    """
    Commercial domain model

    Fields:
        id: Auth user ID
        nombre: Full name
        email: Login email (unique)
        role: admin | comercial
        activo: Inactive users cannot use the API
        clientes_count: Clients assigned (from JOIN)
    """

    id: str = Field(..., description="Commercial ID (auth user id)")
    nombre: str = Field(..., description="Full name")
    email: str = Field(..., description="Login email")
    role: str = Field(ROLE_COMERCIAL, description="Role")
    activo: bool = Field(True, description="Whether the commercial is active")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    clientes_count: int = Field(0, description="Assigned clients (from JOIN)")

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def to_dict(self) -> dict:
        data = self.model_dump()
        data['is_admin'] = self.is_admin
        if data.get('created_at'):
            data['created_at'] = data['created_at'].isoformat()
        if data.get('updated_at'):
            data['updated_at'] = data['updated_at'].isoformat()
        return data


class ComercialCreate(BaseModel):
    """New commercial; the auth user is created with a temporary password"""
    nombre: str = Field(..., min_length=1)
    email: EmailStr
    role: str = Field(ROLE_COMERCIAL, pattern=r'^(admin|comercial)$')
    activo: bool = True


class ComercialUpdate(BaseModel):
    nombre: Optional[str] = Field(None, min_length=1)
    role: Optional[str] = Field(None, pattern=r'^(admin|comercial)$')
    activo: Optional[bool] = None

    @field_validator('nombre', 'role', 'activo')
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be null")
        return value
