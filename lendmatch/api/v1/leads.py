"""/v1/leads - Leads, their conversations, and their partner matches"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from lendmatch.api.v1.schemas import (
    ChatMessageResponse,
    LeadCreate,
    LeadMatchResponse,
    LeadResponse,
    MatchUpdateRequest,
)
from lendmatch.domain.models import ApplicantProfile
from lendmatch.infrastructure.database.repositories import ChatMessageRepository, LeadRepository, MatchRepository
from lendmatch.infrastructure.database.session import get_db

router = APIRouter()


@router.get("/leads", response_model=List[LeadResponse])
def list_leads(db: Session = Depends(get_db)):
    return LeadRepository(db).list_leads()


@router.get("/leads/{lead_id}", response_model=LeadResponse)
def get_lead(lead_id: int, db: Session = Depends(get_db)):
    lead = LeadRepository(db).get_lead(lead_id)
    if lead is None:
        raise HTTPException(status_code=404, detail="Lead not found")
    return lead


@router.post("/leads", response_model=LeadResponse, status_code=201)
def create_lead(request_body: LeadCreate, db: Session = Depends(get_db)):
    lead = LeadRepository(db).create_lead(ApplicantProfile(**request_body.model_dump()))
    db.commit()
    return lead


@router.get("/leads/{lead_id}/messages", response_model=List[ChatMessageResponse])
def list_messages(lead_id: int, db: Session = Depends(get_db)):
    """Conversation history, oldest first"""
    return ChatMessageRepository(db).list_by_lead(lead_id)


@router.get("/leads/{lead_id}/matches", response_model=List[LeadMatchResponse])
def list_matches(lead_id: int, db: Session = Depends(get_db)):
    """Stored matches for a lead, best score first, with partner details"""
    return MatchRepository(db).list_by_lead(lead_id)


@router.put("/leads/{lead_id}/matches/{partner_id}", response_model=LeadMatchResponse)
def update_match(lead_id: int, partner_id: int, request_body: MatchUpdateRequest, db: Session = Depends(get_db)):
    """Mark a match as selected by the lead or submitted to the partner"""
    match_repo = MatchRepository(db)
    match = match_repo.get_match(lead_id, partner_id)
    if match is None:
        raise HTTPException(status_code=404, detail="Match not found")

    updated = match_repo.update_match(match, selected=request_body.selected, submitted=request_body.submitted)
    db.commit()
    return updated
