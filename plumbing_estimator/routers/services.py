from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from .. import models, schemas
from ..catalog import query_services, seed_default_services
from ..database import get_db

router = APIRouter(prefix="/services", tags=["services"])

# Non-nullable columns: PATCH may change them but never null them
REQUIRED_FIELDS = ("name", "unit", "rate", "quantity_basis")


@router.get("/seed")
def seed_services(db: Session = Depends(get_db)):
    """Seed the default catalog. Safe to run multiple times — skips existing."""
    seeded = seed_default_services(db)
    return {"ok": True, "seeded": seeded}


@router.get("", response_model=List[schemas.Service])
def list_services(category: Optional[str] = None, db: Session = Depends(get_db)):
    return query_services(db, category).all()


@router.get("/{service_id}", response_model=schemas.Service)
def get_service(service_id: str, db: Session = Depends(get_db)):
    service = db.query(models.Service).filter(models.Service.id == service_id).first()
    if not service:
        raise HTTPException(status_code=404, detail="Service not found")
    return service


@router.post("", response_model=schemas.Service, status_code=201)
def create_service(service: schemas.ServiceCreate, db: Session = Depends(get_db)):
    existing = db.query(models.Service).filter(models.Service.id == service.id).first()
    if existing:
        raise HTTPException(status_code=409, detail=f"Service '{service.id}' already exists")
    db_service = models.Service(**service.model_dump())
    db.add(db_service)
    db.commit()
    db.refresh(db_service)
    return db_service


@router.patch("/{service_id}", response_model=schemas.Service)
def update_service(service_id: str, update: schemas.ServiceUpdate, db: Session = Depends(get_db)):
    service = db.query(models.Service).filter(models.Service.id == service_id).first()
    if not service:
        raise HTTPException(status_code=404, detail="Service not found — run /services/seed first")
    changes = update.model_dump(exclude_unset=True)
    cleared = [field for field in REQUIRED_FIELDS if field in changes and changes[field] is None]
    if cleared:
        raise HTTPException(status_code=422, detail=f"Cannot clear required field(s): {', '.join(cleared)}")
    for field, value in changes.items():
        setattr(service, field, value)
    db.commit()
    db.refresh(service)
    return service
