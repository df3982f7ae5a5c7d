"""POST /v1/sync/lending-partners - Import the partner catalog from Google Sheets"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from lendmatch.api.v1.schemas import SyncRequest, SyncResponse
from lendmatch.api.dependencies import get_request_id, get_sheets_client
from lendmatch.domain.exceptions import InvalidPartnerDataError, SheetsAPIError
from lendmatch.infrastructure.clients.sheets import SheetsClient, sync_partners
from lendmatch.infrastructure.database.repositories import PartnerRepository
from lendmatch.infrastructure.database.session import get_db

router = APIRouter()


@router.post("/sync/lending-partners", response_model=SyncResponse)
async def sync_lending_partners(
    request_body: SyncRequest,
    request: Request,
    db: Session = Depends(get_db),
    sheets_client: SheetsClient = Depends(get_sheets_client),
):
    """Upsert partners from a spreadsheet range; all rows apply or none do"""
    request_id = get_request_id(request)

    try:
        sheet_partners = await sheets_client.fetch_partners(
            request_body.spreadsheet_id, request_body.range, request_body.api_key
        )
        result = sync_partners(sheet_partners, PartnerRepository(db))
        db.commit()

    except SheetsAPIError as e:
        db.rollback()
        logging.error(f"Sheets API error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=502, detail="Google Sheets service unavailable")

    except InvalidPartnerDataError as e:
        db.rollback()
        logging.warning(f"Invalid partner data: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))

    logging.info(
        "Partner sync completed",
        extra={"request_id": request_id, "added": result.added, "updated": result.updated, "unchanged": result.unchanged},
    )
    return SyncResponse(added=result.added, updated=result.updated, unchanged=result.unchanged)
