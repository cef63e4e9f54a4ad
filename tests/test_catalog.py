"""
Catalog provider tests — services table, default seed, calculator snapshot.
"""

from decimal import Decimal

from plumbing_estimator import models
from plumbing_estimator.catalog import (
    DEFAULT_SERVICES,
    load_catalog,
    seed_default_services,
    to_catalog_service,
)
from plumbing_estimator.quote_calculator import CatalogService, QuantityBasis


def test_services_table_starts_empty(db):
    assert db.query(models.Service).count() == 0
    assert load_catalog(db) == []


def test_seed_inserts_every_default(db):
    seeded = seed_default_services(db)
    assert seeded == len(DEFAULT_SERVICES)
    assert db.query(models.Service).count() == len(DEFAULT_SERVICES)


def test_seed_is_idempotent(db):
    seed_default_services(db)
    assert seed_default_services(db) == 0
    assert db.query(models.Service).count() == len(DEFAULT_SERVICES)


def test_seed_keeps_edited_rates(db):
    """Re-seeding never overwrites a rate changed after the first seed."""
    seed_default_services(db)
    service = db.query(models.Service).filter(models.Service.id == "drain-cleaning").first()
    service.rate = 210.0
    db.commit()
    seed_default_services(db)
    db.refresh(service)
    assert service.rate == 210.0


def test_defaults_cover_every_quantity_basis():
    bases = {data["quantity_basis"] for data in DEFAULT_SERVICES.values()}
    assert bases == set(QuantityBasis)
    for data in DEFAULT_SERVICES.values():
        assert data["rate"] >= 0


def test_snapshot_is_frozen_catalog_service(seeded_db):
    catalog = load_catalog(seeded_db)
    assert len(catalog) == len(DEFAULT_SERVICES)
    assert all(isinstance(service, CatalogService) for service in catalog)
    repiping = next(service for service in catalog if service.id == "repiping")
    assert repiping.quantity_basis == QuantityBasis.AREA
    assert repiping.rate == Decimal("45.0")
    assert repiping.unit == "sqm"


def test_snapshot_ordered_by_category_then_name(seeded_db):
    catalog = load_catalog(seeded_db)
    keys = [(service.category, service.name) for service in catalog]
    assert keys == sorted(keys)


def test_snapshot_category_filter(seeded_db):
    catalog = load_catalog(seeded_db, category="Diagnostics")
    assert {service.id for service in catalog} == {"leak-detection", "camera-inspection"}


def test_rate_conversion_avoids_float_noise():
    row = models.Service(
        id="odd-rate", name="Odd Rate", unit="flat", rate=12.1,
        quantity_basis=QuantityBasis.FLAT,
    )
    assert to_catalog_service(row).rate == Decimal("12.1")
    assert to_catalog_service(row).description == ""
