"""
Estimate API — the Presentation Layer's door into the quote calculator.

POST /estimate      — compute a quote, return JSON
POST /estimate/pdf  — compute the same quote, return a printable PDF

Nothing is stored: every call snapshots the catalog and builds a new quote.
"""

import logging
import re

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from .. import schemas
from ..catalog import load_catalog
from ..config import settings
from ..database import get_db
from ..pdf_generator import generate_quote_pdf
from ..quote_calculator import (
    EmptySelection,
    EstimateRequest,
    InvalidInput,
    Quote,
    QuoteError,
    UnknownService,
    compute_quote,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/estimate", tags=["estimate"])

ERROR_STATUS = {
    EmptySelection: 400,
    UnknownService: 404,
    InvalidInput: 422,
}


def _to_request(body: schemas.EstimateRequest) -> EstimateRequest:
    return EstimateRequest(
        selected_service_ids=tuple(str(service_id) for service_id in body.service_ids),
        project_name=body.project_name,
        area=body.area_sqm,
        fixtures=body.fixtures,
        location_factor=body.location_factor,
        overhead_pct=body.overhead_pct,
        tax_pct=body.tax_pct,
    )


def build_quote(body: schemas.EstimateRequest, db: Session) -> Quote:
    """Snapshot the catalog and run the calculator. QuoteError → HTTPException."""
    try:
        quote = compute_quote(load_catalog(db), _to_request(body))
    except QuoteError as e:
        logger.warning(f"Estimate rejected: {e.code}: {e}")
        raise HTTPException(status_code=ERROR_STATUS.get(type(e), 400), detail=e.to_dict())
    logger.info(f"Estimate computed: {len(quote.items)} services, total {quote.total}")
    return quote


@router.post("", response_model=schemas.Quote)
def create_estimate(body: schemas.EstimateRequest, db: Session = Depends(get_db)):
    return schemas.Quote.from_quote(build_quote(body, db))


def _pdf_filename(project_name: str) -> str:
    slug = re.sub(r"[^A-Za-z0-9]+", "-", project_name or "").strip("-")
    return f"Estimate-{slug or 'project'}.pdf"


@router.post("/pdf")
def create_estimate_pdf(body: schemas.EstimateRequest, db: Session = Depends(get_db)):
    """Same calculation as POST /estimate, rendered as application/pdf."""
    quote = build_quote(body, db)
    company = {
        "name": settings.COMPANY_NAME,
        "email": settings.COMPANY_EMAIL,
        "phone": settings.COMPANY_PHONE,
    }
    # fpdf2 returns a bytearray
    pdf_bytes = bytes(generate_quote_pdf(quote, company, valid_days=settings.QUOTE_VALID_DAYS))
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{_pdf_filename(quote.project_name)}"',
        },
    )
