"""
Catalog Provider — the services table as the calculator sees it.

load_catalog() turns ORM rows into frozen CatalogService snapshots so the
quote calculator never touches a live session.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from . import models
from .quote_calculator import CatalogService, QuantityBasis

logger = logging.getLogger(__name__)

# Default catalog: residential plumbing, USD rates before location factor.
# Update via PATCH /services/{id} as rates change.
DEFAULT_SERVICES = {
    "leak-detection": {
        "name": "Leak Detection",
        "description": "Acoustic and thermal leak tracing, one visit",
        "category": "Diagnostics",
        "unit": "flat",
        "rate": 150.0,
        "quantity_basis": QuantityBasis.FLAT,
    },
    "camera-inspection": {
        "name": "Sewer Camera Inspection",
        "description": "Video inspection of main drain line with recording",
        "category": "Diagnostics",
        "unit": "flat",
        "rate": 225.0,
        "quantity_basis": QuantityBasis.FLAT,
    },
    "drain-cleaning": {
        "name": "Drain Cleaning",
        "description": "Snake and hydro-jet of a blocked drain",
        "category": "Maintenance",
        "unit": "flat",
        "rate": 180.0,
        "quantity_basis": QuantityBasis.FLAT,
    },
    "repiping": {
        "name": "Re-piping (PEX)",
        "description": "Replace supply lines with PEX, priced by floor area served",
        "category": "Installation",
        "unit": "sqm",
        "rate": 45.0,
        "quantity_basis": QuantityBasis.AREA,
    },
    "underfloor-heating": {
        "name": "Hydronic Underfloor Heating",
        "description": "Loop layout, manifold connection and pressure test",
        "category": "Installation",
        "unit": "sqm",
        "rate": 85.0,
        "quantity_basis": QuantityBasis.AREA,
    },
    "fixture-install": {
        "name": "Fixture Installation",
        "description": "Set and connect toilets, sinks, faucets and showers",
        "category": "Installation",
        "unit": "fixture",
        "rate": 120.0,
        "quantity_basis": QuantityBasis.FIXTURES,
    },
    "fixture-repair": {
        "name": "Fixture Repair",
        "description": "Cartridge, valve and seal replacement",
        "category": "Maintenance",
        "unit": "fixture",
        "rate": 85.0,
        "quantity_basis": QuantityBasis.FIXTURES,
    },
    "water-heater-install": {
        "name": "Water Heater Installation",
        "description": "Remove old unit, install tank or tankless heater, code-compliant venting",
        "category": "Installation",
        "unit": "flat",
        "rate": 950.0,
        "quantity_basis": QuantityBasis.FLAT,
    },
    "backflow-test": {
        "name": "Backflow Preventer Test",
        "description": "Annual certified backflow test and report",
        "category": "Compliance",
        "unit": "flat",
        "rate": 95.0,
        "quantity_basis": QuantityBasis.FLAT,
    },
}


def to_catalog_service(row: models.Service) -> CatalogService:
    # str() first so 12.1 stays 12.1 instead of its binary expansion
    return CatalogService(
        id=row.id,
        name=row.name,
        description=row.description or "",
        category=row.category,
        unit=row.unit,
        rate=Decimal(str(row.rate)),
        quantity_basis=QuantityBasis(row.quantity_basis),
    )


def query_services(db: Session, category: Optional[str] = None):
    query = db.query(models.Service)
    if category:
        query = query.filter(models.Service.category == category)
    return query.order_by(models.Service.category, models.Service.name)


def load_catalog(db: Session, category: Optional[str] = None) -> List[CatalogService]:
    """Snapshot the catalog for one calculation."""
    return [to_catalog_service(row) for row in query_services(db, category).all()]


def seed_default_services(db: Session) -> int:
    """Insert any missing default services. Safe to run multiple times — skips existing."""
    seeded = 0
    for service_id, data in DEFAULT_SERVICES.items():
        existing = db.query(models.Service).filter(models.Service.id == service_id).first()
        if not existing:
            db.add(models.Service(id=service_id, **data))
            seeded += 1
    db.commit()
    if seeded:
        logger.info(f"Seeded {seeded} default services")
    return seeded
