"""
Quote Calculator — the pricing core.

Pure math, no I/O: a catalog snapshot plus an EstimateRequest in, an
immutable Quote out. Callers (routers, scripts, tests) own catalog loading
and presentation.

Per line item:  cost = quantity × rate × location_factor
Roll-up:        subtotal = Σ cost
                overhead = subtotal × overhead_pct
                tax      = (subtotal + overhead) × tax_pct
                total    = subtotal + overhead + tax

Money is carried as Decimal and rounded half-up to cents once, when a figure
becomes displayable. Subtotal is summed from the rounded line costs and total
from the rounded subtotal/overhead/tax, so the quote always adds up to the cent.
"""

import enum
import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Iterable, Optional, Tuple

from .config import settings

CENT = Decimal("0.01")

# Largest accepted input or catalog rate. Keeps every figure well inside
# QUOTE_PRECISION significant digits, so rounding to cents cannot overflow.
MAX_INPUT = Decimal("1e12")
QUOTE_PRECISION = 100


class QuantityBasis(str, enum.Enum):
    """Which request input drives a service's quantity."""
    AREA = "area"
    FIXTURES = "fixtures"
    FLAT = "flat"


# --- Errors ---

class QuoteError(Exception):
    """Base for every rejection raised before a Quote is built."""

    code = "quote_error"

    def to_dict(self) -> dict:
        return {"error": self.code, "message": str(self)}


class EmptySelection(QuoteError):
    code = "empty_selection"

    def __init__(self):
        super().__init__("No services selected — choose at least one service")


class UnknownService(QuoteError):
    code = "unknown_service"

    def __init__(self, service_id):
        self.service_id = service_id
        super().__init__(f"Service '{service_id}' is not in the catalog")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "service_id": self.service_id}


class InvalidInput(QuoteError):
    code = "invalid_input"

    def __init__(self, field: str, value, reason: str = "must not be negative"):
        self.field = field
        self.value = value
        super().__init__(f"{field} {reason} (got {value!r})")

    def to_dict(self) -> dict:
        value = self.value if isinstance(self.value, (int, float, str)) else str(self.value)
        return {**super().to_dict(), "field": self.field, "value": value}


# --- Inputs ---

@dataclass(frozen=True)
class CatalogService:
    """Read-only snapshot of one catalog service."""
    id: str
    name: str
    unit: str
    rate: Decimal
    quantity_basis: QuantityBasis
    description: str = ""
    category: Optional[str] = None


@dataclass(frozen=True)
class EstimateRequest:
    """
    One estimate request, built fresh per user action.

    Numeric fields are kept as received; compute_quote() coerces and
    validates them. None on a factor means "use the configured default".
    """
    selected_service_ids: Tuple[str, ...]
    project_name: str = ""
    area: object = 0
    fixtures: object = 0
    location_factor: object = None
    overhead_pct: object = None
    tax_pct: object = None


# --- Output ---

@dataclass(frozen=True)
class LineItem:
    service_id: str
    service_name: str
    unit: str
    quantity: Decimal
    rate: Decimal
    cost: Decimal


@dataclass(frozen=True)
class Quote:
    project_name: str
    area: Decimal
    fixtures: int
    location_factor: Decimal
    overhead_pct: Decimal
    tax_pct: Decimal
    items: Tuple[LineItem, ...]
    subtotal: Decimal
    overhead: Decimal
    tax: Decimal
    total: Decimal


# --- Helpers ---

def money(value) -> Decimal:
    """Round to cents, half-up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value) -> Optional[Decimal]:
    """
    Parse a user-supplied number. Returns None for anything non-numeric:
    None, blank strings, unparsable text, booleans, NaN and infinities.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value)) if math.isfinite(value) else None
    text = str(value).strip()
    if not text:
        return None
    try:
        parsed = Decimal(text)
    except ArithmeticError:
        return None
    return parsed if parsed.is_finite() else None


def _non_negative(field: str, value, default) -> Decimal:
    parsed = to_decimal(value)
    if parsed is None:
        return Decimal(str(default))
    if parsed < 0:
        raise InvalidInput(field, value)
    if parsed > MAX_INPUT:
        raise InvalidInput(field, value, reason="is too large")
    return parsed


def _fixture_count(value) -> int:
    parsed = _non_negative("fixtures", value, 0)
    if parsed != parsed.to_integral_value():
        raise InvalidInput("fixtures", value, reason="must be a whole number")
    return int(parsed)


def _location_factor(value) -> Decimal:
    parsed = _non_negative("location_factor", value, settings.LOCATION_FACTOR_DEFAULT)
    if parsed == 0:
        raise InvalidInput("location_factor", value, reason="must be greater than zero")
    return parsed


def _ordered_unique(ids: Iterable) -> list:
    """Selection order, first occurrence wins."""
    return list(dict.fromkeys(ids or ()))


def quantity_for(service: CatalogService, area: Decimal, fixtures: int) -> Decimal:
    if service.quantity_basis == QuantityBasis.AREA:
        return area
    if service.quantity_basis == QuantityBasis.FIXTURES:
        return Decimal(fixtures)
    return Decimal(1)


# --- Entry point ---

def compute_quote(catalog: Iterable[CatalogService], request: EstimateRequest) -> Quote:
    """
    Build a Quote from a catalog snapshot and an estimate request.

    Raises:
        EmptySelection: no services selected
        UnknownService: a selected id is missing from the catalog
        InvalidInput: a negative or too-large numeric field, or a bad catalog rate
    """
    selected_ids = _ordered_unique(request.selected_service_ids)
    if not selected_ids:
        raise EmptySelection()

    by_id = {service.id: service for service in catalog}
    for service_id in selected_ids:
        if service_id not in by_id:
            raise UnknownService(service_id)

    area = _non_negative("area", request.area, 0)
    fixtures = _fixture_count(request.fixtures)
    location_factor = _location_factor(request.location_factor)
    overhead_pct = _non_negative("overhead_pct", request.overhead_pct, settings.OVERHEAD_PCT_DEFAULT)
    tax_pct = _non_negative("tax_pct", request.tax_pct, settings.TAX_PCT_DEFAULT)

    for service_id in selected_ids:
        rate = by_id[service_id].rate
        if rate < 0:
            raise InvalidInput("rate", rate)
        if rate > MAX_INPUT:
            raise InvalidInput("rate", rate, reason="is too large")

    with localcontext() as ctx:
        ctx.prec = QUOTE_PRECISION
        items = []
        for service_id in selected_ids:
            service = by_id[service_id]
            quantity = quantity_for(service, area, fixtures)
            items.append(LineItem(
                service_id=service.id,
                service_name=service.name,
                unit=service.unit,
                quantity=quantity,
                rate=money(service.rate),
                cost=money(quantity * service.rate * location_factor),
            ))

        subtotal = sum((item.cost for item in items), Decimal("0.00"))
        overhead = money(subtotal * overhead_pct)
        tax = money((subtotal + overhead) * tax_pct)
        total = subtotal + overhead + tax

    return Quote(
        project_name=request.project_name or "",
        area=area,
        fixtures=fixtures,
        location_factor=location_factor,
        overhead_pct=overhead_pct,
        tax_pct=tax_pct,
        items=tuple(items),
        subtotal=subtotal,
        overhead=overhead,
        tax=tax,
        total=total,
    )


def format_currency(amount) -> str:
    """Format a number as $X,XXX.XX"""
    try:
        value = money(to_decimal(amount) or 0)
    except ArithmeticError:
        value = Decimal("0.00")
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"
