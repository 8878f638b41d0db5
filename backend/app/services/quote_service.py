"""
Business Tools Service

Quote calculator with per-line discounts and the commercial email templates
(placeholders written as {{name}}). Sending the emails is not handled here.

Author: TM3
Date: 2025-08-11
"""
import re
from dataclasses import dataclass, field, asdict
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.domain.errors import NotFoundError
from app.repositories.product_repository import ProductRepository


# ================================================================================
# QUOTE CALCULATOR
# ================================================================================

@dataclass
class QuoteLine:
    producto_id: str
    nombre: str
    precio: Decimal
    quantity: int = 1
    discount: float = 0.0  # percentage 0-100

    @property
    def gross(self) -> Decimal:
        return self.precio * self.quantity

    @property
    def discount_amount(self) -> Decimal:
        return self.gross * Decimal(str(self.discount)) / 100

    @property
    def total(self) -> Decimal:
        return self.gross - self.discount_amount

    def to_dict(self) -> dict:
        data = asdict(self)
        data['precio'] = float(self.precio)
        data['total'] = float(self.total)
        return data


def clamp_discount(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


@dataclass
class Quote:
    """In-memory quote; lines are keyed by product"""
    lines: List[QuoteLine] = field(default_factory=list)

    def _find(self, producto_id: str) -> Optional[QuoteLine]:
        return next((line for line in self.lines if line.producto_id == producto_id), None)

    def add_product(self, producto_id: str, nombre: str, precio) -> QuoteLine:
        """Add one unit of a product (increments an existing line)"""
        line = self._find(producto_id)
        if line:
            line.quantity += 1
            return line
        line = QuoteLine(producto_id=producto_id, nombre=nombre, precio=Decimal(str(precio)))
        self.lines.append(line)
        return line

    def update_quantity(self, producto_id: str, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line"""
        if quantity <= 0:
            self.lines = [line for line in self.lines if line.producto_id != producto_id]
            return
        line = self._find(producto_id)
        if line:
            line.quantity = quantity

    def update_discount(self, producto_id: str, discount: float) -> None:
        line = self._find(producto_id)
        if line:
            line.discount = clamp_discount(discount)

    def clear(self) -> None:
        self.lines = []

    @property
    def item_count(self) -> int:
        return len(self.lines)

    @property
    def subtotal(self) -> Decimal:
        return sum((line.gross for line in self.lines), Decimal('0'))

    @property
    def discount_total(self) -> Decimal:
        return sum((line.discount_amount for line in self.lines), Decimal('0'))

    @property
    def total(self) -> Decimal:
        return sum((line.total for line in self.lines), Decimal('0'))

    def to_dict(self) -> dict:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "item_count": self.item_count,
            "subtotal": float(self.subtotal),
            "discount_total": float(self.discount_total),
            "total": float(self.total),
        }


class QuoteLineRequest(BaseModel):
    producto_id: str
    quantity: int = 1
    discount: float = 0.0


class QuoteRequest(BaseModel):
    lines: List[QuoteLineRequest] = Field(default_factory=list)


# ================================================================================
# EMAIL TEMPLATES
# ================================================================================

@dataclass(frozen=True)
class EmailTemplate:
    id: str
    name: str
    subject: str
    body: str
    variables: tuple

    def to_dict(self) -> dict:
        data = asdict(self)
        data['variables'] = list(self.variables)
        return data


EMAIL_TEMPLATES: List[EmailTemplate] = [
    EmailTemplate(
        id='1',
        name='Cotización Nueva',
        subject='Cotización BARPLAS - {{clientName}}',
        body="""Estimado/a {{clientName}},

Esperamos que se encuentre bien. Adjunto encontrará la cotización solicitada para los productos BARPLAS.

RESUMEN DE COTIZACIÓN:
- Total de productos: {{itemCount}}
- Subtotal: {{subtotal}}
- Descuentos aplicados: {{discount}}
- TOTAL: {{total}}

Esta cotización tiene una validez de 30 días naturales.

Para cualquier consulta, no dude en contactarnos.

Saludos cordiales,
Equipo Comercial BARPLAS""",
        variables=('clientName', 'itemCount', 'subtotal', 'discount', 'total'),
    ),
    EmailTemplate(
        id='2',
        name='Seguimiento Pedido',
        subject='Estado de su pedido #{{orderNumber}} - BARPLAS',
        body="""Estimado/a {{clientName}},

Le informamos sobre el estado actual de su pedido:

PEDIDO: #{{orderNumber}}
ESTADO: {{orderStatus}}
FECHA ESTIMADA DE ENTREGA: {{deliveryDate}}

{{statusMessage}}

Gracias por confiar en BARPLAS.

Saludos cordiales,
Equipo Comercial BARPLAS""",
        variables=('clientName', 'orderNumber', 'orderStatus', 'deliveryDate', 'statusMessage'),
    ),
    EmailTemplate(
        id='3',
        name='Bienvenida Cliente',
        subject='Bienvenido/a a BARPLAS - {{clientName}}',
        body="""¡Bienvenido/a a la familia BARPLAS!

Estimado/a {{clientName}},

Es un placer darle la bienvenida como nuevo cliente de BARPLAS. Estamos comprometidos a brindarle el mejor servicio y productos de calidad.

Su comercial asignado es: {{salesRep}}
Teléfono de contacto: {{phone}}
Email: {{email}}

No dude en contactarnos para cualquier consulta.

¡Esperamos una larga y exitosa relación comercial!

Saludos cordiales,
Equipo BARPLAS""",
        variables=('clientName', 'salesRep', 'phone', 'email'),
    ),
]

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def get_template(template_id: str) -> EmailTemplate:
    for template in EMAIL_TEMPLATES:
        if template.id == template_id:
            return template
    raise NotFoundError("Email template", template_id)


def render_text(text: str, values: Dict[str, object]) -> str:
    """Replace every {{name}} present in values; unknown placeholders stay"""
    def replace(match):
        name = match.group(1)
        return str(values[name]) if name in values else match.group(0)
    return _PLACEHOLDER.sub(replace, text)


def render_template(template: EmailTemplate, values: Dict[str, object]) -> dict:
    return {
        "id": template.id,
        "name": template.name,
        "subject": render_text(template.subject, values),
        "body": render_text(template.body, values),
        "missing": [v for v in template.variables if v not in values],
    }


class QuoteService:
    def __init__(self, product_repo: Optional[ProductRepository] = None):
        self.product_repo = product_repo or ProductRepository()

    def build_quote(self, request: QuoteRequest) -> Quote:
        """Price a quote with current product prices"""
        ids = [line.producto_id for line in request.lines]
        products = {p.producto_id: p for p in self.product_repo.find_stock(ids)}

        quote = Quote()
        for line in request.lines:
            product = products.get(line.producto_id)
            if product is None:
                raise NotFoundError("Product", line.producto_id)
            quote.add_product(product.producto_id, product.nombre, product.precio)
            quote.update_quantity(product.producto_id, line.quantity)
            quote.update_discount(product.producto_id, line.discount)

        return quote
