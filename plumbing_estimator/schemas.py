from pydantic import BaseModel, Field
from typing import Any, Optional, List, Union
from datetime import datetime
from .quote_calculator import QuantityBasis, Quote as CoreQuote

# Numeric inputs pass through untouched; the calculator owns coercion
# (booleans, objects and junk text become 0 or the configured default).
LooseNumber = Optional[Any]


class ServiceBase(BaseModel):
    name: str
    description: str = ""
    category: Optional[str] = None
    unit: str = "flat"
    rate: float = Field(0.0, ge=0)
    quantity_basis: QuantityBasis = QuantityBasis.FLAT


class ServiceCreate(ServiceBase):
    id: str = Field(..., min_length=1, pattern=r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


class ServiceUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    unit: Optional[str] = None
    rate: Optional[float] = Field(None, ge=0)
    quantity_basis: Optional[QuantityBasis] = None


class Service(ServiceBase):
    id: str
    updated_at: Optional[datetime] = None
    class Config:
        from_attributes = True


class EstimateRequest(BaseModel):
    project_name: str = ""
    area_sqm: LooseNumber = 0
    fixtures: LooseNumber = 0
    service_ids: List[Union[str, int]] = []
    location_factor: LooseNumber = None
    overhead_pct: LooseNumber = None
    tax_pct: LooseNumber = None


class LineItem(BaseModel):
    service_id: str
    service_name: str
    unit: str
    quantity: float
    rate: float
    cost: float


class Quote(BaseModel):
    project_name: str
    area_sqm: float
    fixtures: int
    location_factor: float
    overhead_pct: float
    tax_pct: float
    items: List[LineItem]
    subtotal: float
    overhead: float
    tax: float
    total: float

    @classmethod
    def from_quote(cls, quote: CoreQuote) -> "Quote":
        return cls(
            project_name=quote.project_name,
            area_sqm=quote.area,
            fixtures=quote.fixtures,
            location_factor=quote.location_factor,
            overhead_pct=quote.overhead_pct,
            tax_pct=quote.tax_pct,
            items=[
                LineItem(
                    service_id=item.service_id,
                    service_name=item.service_name,
                    unit=item.unit,
                    quantity=item.quantity,
                    rate=item.rate,
                    cost=item.cost,
                )
                for item in quote.items
            ],
            subtotal=quote.subtotal,
            overhead=quote.overhead,
            tax=quote.tax,
            total=quote.total,
        )
