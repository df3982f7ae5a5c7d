"""/v1/lending-partners - Lending partner catalog management"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from lendmatch.api.v1.schemas import PartnerCreate, PartnerResponse, PartnerUpdate
from lendmatch.infrastructure.database.repositories import PartnerRepository
from lendmatch.infrastructure.database.session import get_db

router = APIRouter()

REQUIRED_FIELDS = {
    "name",
    "loan_type",
    "min_loan_amount",
    "max_loan_amount",
    "min_credit_score",
    "min_annual_revenue",
    "min_years_in_business",
    "active",
}


@router.get("/lending-partners", response_model=List[PartnerResponse])
def list_partners(db: Session = Depends(get_db)):
    """Active partners, ordered by id"""
    return PartnerRepository(db).list_active_partners()


@router.post("/lending-partners", response_model=PartnerResponse, status_code=201)
def create_partner(request_body: PartnerCreate, db: Session = Depends(get_db)):
    partner = PartnerRepository(db).create_partner(**request_body.model_dump())
    db.commit()
    logging.info("Lending partner created", extra={"partner_id": partner.id, "partner_name": partner.name})
    return partner


@router.put("/lending-partners/{partner_id}", response_model=PartnerResponse)
def update_partner(partner_id: int, request_body: PartnerUpdate, db: Session = Depends(get_db)):
    """
    Partially update a partner.

    The loan range is validated against the merged record, so raising only
    min_loan_amount above the stored max is rejected.
    """
    partner_repo = PartnerRepository(db)
    partner = partner_repo.get_partner(partner_id)
    if partner is None:
        raise HTTPException(status_code=404, detail="Lending partner not found")

    changes = request_body.model_dump(exclude_unset=True)
    nulled = sorted(name for name in REQUIRED_FIELDS if name in changes and changes[name] is None)
    if nulled:
        raise HTTPException(status_code=400, detail=f"Fields cannot be null: {', '.join(nulled)}")

    min_amount = changes.get("min_loan_amount", partner.min_loan_amount)
    max_amount = changes.get("max_loan_amount", partner.max_loan_amount)
    if max_amount < min_amount:
        raise HTTPException(status_code=400, detail="max_loan_amount must be greater than or equal to min_loan_amount")

    updated = partner_repo.update_partner(partner_id, **changes)
    db.commit()
    return updated


@router.delete("/lending-partners/{partner_id}", status_code=204)
def delete_partner(partner_id: int, db: Session = Depends(get_db)):
    if not PartnerRepository(db).delete_partner(partner_id):
        raise HTTPException(status_code=404, detail="Lending partner not found")
    db.commit()
    return Response(status_code=204)
