"""POST /v1/chat/message - Conversational lead qualification endpoint"""

import time
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from lendmatch.api.v1.schemas import ChatRequest, ChatResponse, LeadResponse, MatchSummary
from lendmatch.api.dependencies import get_assistant, get_request_id, get_scoring_variant
from lendmatch.domain.assistant import Assistant
from lendmatch.domain.exceptions import AssistantAPIError
from lendmatch.domain.models import ChatTurn, PartnerMatch, ScoringVariant
from lendmatch.domain.ranking import rank_partners
from lendmatch.domain.scoring import explain_score
from lendmatch.infrastructure.database.repositories import (
    ChatMessageRepository,
    LeadRepository,
    MatchRepository,
    PartnerRepository,
    lead_to_profile,
)
from lendmatch.infrastructure.database.session import get_db
from lendmatch.infrastructure.observability.logging import log_chat_turn
from lendmatch.infrastructure.observability.metrics import record_ranking

router = APIRouter()


@router.post("/chat/message", response_model=ChatResponse)
async def post_chat_message(
    request_body: ChatRequest,
    request: Request,
    db: Session = Depends(get_db),
    assistant: Assistant = Depends(get_assistant),
    variant: ScoringVariant = Depends(get_scoring_variant),
):
    """
    Process one user message.

    Flow:
    1. Load the lead's conversation (if continuing) and append the message
    2. Extract profile facts from the conversation
    3. Create or update the lead with whatever was extracted
    4. Rank the active partner catalog and persist new matches
    5. Generate the assistant reply
    6. Persist both messages and return reply, lead, and matches
    """
    start_time = time.time()
    request_id = get_request_id(request)

    lead_repo = LeadRepository(db)
    message_repo = ChatMessageRepository(db)
    match_repo = MatchRepository(db)

    try:
        # 1. Conversation so far
        lead = None
        history: List[ChatTurn] = []
        if request_body.lead_id is not None:
            lead = lead_repo.get_lead(request_body.lead_id)
            if lead is None:
                raise HTTPException(status_code=404, detail="Lead not found")
            history = [ChatTurn(role=m.role, content=m.content) for m in message_repo.list_by_lead(lead.id)]
        history.append(ChatTurn(role="user", content=request_body.message))

        # 2. Extract structured data
        extracted = await assistant.extract(history)

        # 3. Upsert lead
        if not extracted.is_empty():
            if lead is None:
                lead = lead_repo.create_lead(extracted)
            else:
                lead_repo.update_lead(lead, extracted)

        # 4. Rank partners
        catalog = PartnerRepository(db).active_catalog()
        profile = lead_to_profile(lead) if lead is not None else None
        matches: List[PartnerMatch] = []
        if profile is not None:
            matches = rank_partners(profile, catalog, variant)
            for match in matches:
                if match_repo.get_match(lead.id, match.partner.id) is None:
                    match_repo.create_match(lead_id=lead.id, partner_id=match.partner.id, score=match.score)
            record_ranking(len(matches), matches[0].score if matches else 0)

        # 5. Reply
        reply = await assistant.reply(history, profile, matches, catalog)

        # 6. Persist conversation
        if lead is not None:
            message_repo.create_message(lead.id, "user", request_body.message)
            message_repo.create_message(lead.id, "assistant", reply)

        db.commit()

        duration_ms = (time.time() - start_time) * 1000
        log_chat_turn(request_id, lead.id if lead else None, len(matches), matches[0].score if matches else 0, duration_ms)

        return ChatResponse(
            message=reply,
            lead=LeadResponse.model_validate(lead) if lead is not None else None,
            matches=[
                MatchSummary(
                    partner_id=match.partner.id,
                    partner_name=match.partner.name,
                    loan_type=match.partner.loan_type,
                    score=match.score,
                    factors=explain_score(profile, match.partner, variant),
                )
                for match in matches
            ],
        )

    except HTTPException:
        db.rollback()
        raise

    except AssistantAPIError as e:
        db.rollback()
        logging.error(f"Assistant error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Assistant service unavailable")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Failed to process chat message")
