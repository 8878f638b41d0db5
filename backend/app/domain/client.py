"""
Client Domain Model

Represents a client of a commercial (table `clientes`).

Author: TM3
Date: 2025-08-09
"""
from pydantic import BaseModel, Field, ConfigDict, EmailStr, field_validator
from typing import Optional
from datetime import datetime


CLIENT_TYPES = [
    'Minorista',
    'Mayorista',
    'Distribuidor',
    'Fabricante',
    'Institución',
    'Otros',
]

DEFAULT_CLIENT_TYPE = 'Minorista'

# Filter values accepted by the clients list
CLIENT_STATUS_FILTERS = ('activo', 'inactivo', 'all')


class Client(BaseModel):
    """
    Client domain model - represents a row of `clientes`

    Fields:
        id: Client ID (uuid)
        nombre: Company or contact name
        email, telefono, direccion: Contact data
        tipo: Client type (Minorista by default; legacy rows may hold 'minorista')
        notas: Free notes
        logo_url: Public URL in the `clients` storage bucket
        activo: Whether the client is active
        comercial_id: Owning commercial

        # From JOINs (optional)
        comercial_nombre: Owning commercial's name
        pedidos_count: Number of orders placed
    """

    id: str = Field(..., description="Client ID")
    nombre: str = Field(..., description="Client name")
    email: Optional[str] = Field(None, description="Contact email")
    telefono: Optional[str] = Field(None, description="Contact phone")
    direccion: Optional[str] = Field(None, description="Address")
    tipo: str = Field(DEFAULT_CLIENT_TYPE, description="Client type")
    notas: Optional[str] = Field(None, description="Notes")
    logo_url: Optional[str] = Field(None, description="Logo URL")
    activo: bool = Field(True, description="Whether client is active")
    comercial_id: Optional[str] = Field(None, description="Owning commercial ID")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    comercial_nombre: Optional[str] = Field(None, description="Commercial name (from JOIN)")
    pedidos_count: int = Field(0, description="Number of orders (from JOIN)")

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        data = self.model_dump()
        if data.get('created_at'):
            data['created_at'] = data['created_at'].isoformat()
        if data.get('updated_at'):
            data['updated_at'] = data['updated_at'].isoformat()
        return data


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _check_client_type(value: Optional[str]) -> Optional[str]:
    """Match a client type case-insensitively and return its canonical spelling"""
    if value is None:
        return value
    for client_type in CLIENT_TYPES:
        if client_type.lower() == value.strip().lower():
            return client_type
    raise ValueError(f"tipo must be one of: {', '.join(CLIENT_TYPES)}")


def _not_null(value):
    # Optional on update only means "may be omitted"; these columns are NOT NULL
    if value is None:
        raise ValueError("field cannot be null")
    return value


class ClientCreate(BaseModel):
    """Schema for creating a client (comercial_id defaults to the caller)"""
    nombre: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    telefono: Optional[str] = None
    direccion: Optional[str] = None
    tipo: str = DEFAULT_CLIENT_TYPE
    notas: Optional[str] = None
    logo_url: Optional[str] = None
    activo: bool = True
    comercial_id: Optional[str] = None

    blank_email = field_validator('email', mode='before')(_blank_to_none)
    validate_tipo = field_validator('tipo')(_check_client_type)


class ClientUpdate(BaseModel):
    """Schema for updating a client; only fields sent are written"""
    nombre: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    telefono: Optional[str] = None
    direccion: Optional[str] = None
    tipo: Optional[str] = None
    notas: Optional[str] = None
    logo_url: Optional[str] = None
    activo: Optional[bool] = None
    comercial_id: Optional[str] = None

    blank_email = field_validator('email', mode='before')(_blank_to_none)
    required_when_sent = field_validator('nombre', 'tipo', 'activo')(_not_null)
    validate_tipo = field_validator('tipo')(_check_client_type)
