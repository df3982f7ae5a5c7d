"""Google Sheets client for importing the lending partner catalog"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from lendmatch.config import settings
from lendmatch.domain.exceptions import InvalidPartnerDataError, SheetsAPIError
from lendmatch.infrastructure.observability.metrics import sheets_sync_counter

# Column order of the partner spreadsheet
SHEET_COLUMNS = [
    "name",
    "loan_type",
    "min_loan_amount",
    "max_loan_amount",
    "min_credit_score",
    "min_annual_revenue",
    "min_years_in_business",
    "interest_rate_min",
    "interest_rate_max",
    "term_length_min",
    "term_length_max",
    "term_unit",
    "funding_time_min",
    "funding_time_max",
    "funding_time_unit",
    "active",
]
REQUIRED_COLUMNS = 7  # name through min_years_in_business
NUMERIC_COLUMNS = [
    "min_loan_amount",
    "max_loan_amount",
    "min_credit_score",
    "min_annual_revenue",
    "min_years_in_business",
    "interest_rate_min",
    "interest_rate_max",
    "term_length_min",
    "term_length_max",
    "funding_time_min",
    "funding_time_max",
]


@dataclass
class SyncResult:
    """Outcome of a spreadsheet sync"""

    added: int = 0
    updated: int = 0
    unchanged: int = 0


def _cell(row: List[Any], index: int) -> Any:
    if index >= len(row):
        return None
    value = row[index]
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _to_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    return float(str(value).replace("$", "").replace(",", ""))


def _to_int(value: Any) -> Optional[int]:
    number = _to_float(value)
    return int(number) if number is not None else None


def parse_partner_row(row: List[Any]) -> Dict[str, Any]:
    """
    Map one spreadsheet row to partner fields.

    Raises:
        InvalidPartnerDataError: Missing required columns, non-numeric,
            negative or non-finite thresholds, or a max loan amount below the minimum
    """
    if len(row) < REQUIRED_COLUMNS:
        raise InvalidPartnerDataError(f"Row has {len(row)} columns, expected at least {REQUIRED_COLUMNS}: {row}")

    try:
        partner = {
            "name": _cell(row, 0),
            "loan_type": _cell(row, 1),
            "min_loan_amount": _to_float(_cell(row, 2)),
            "max_loan_amount": _to_float(_cell(row, 3)),
            "min_credit_score": _to_int(_cell(row, 4)),
            "min_annual_revenue": _to_float(_cell(row, 5)),
            "min_years_in_business": _to_float(_cell(row, 6)),
            "interest_rate_min": _to_float(_cell(row, 7)),
            "interest_rate_max": _to_float(_cell(row, 8)),
            "term_length_min": _to_int(_cell(row, 9)),
            "term_length_max": _to_int(_cell(row, 10)),
            "term_unit": _cell(row, 11),
            "funding_time_min": _to_int(_cell(row, 12)),
            "funding_time_max": _to_int(_cell(row, 13)),
            "funding_time_unit": _cell(row, 14),
            "active": str(_cell(row, 15)).lower() == "true" if _cell(row, 15) is not None else True,
        }
    except (ValueError, OverflowError) as e:
        raise InvalidPartnerDataError(f"Non-numeric value in row {row}: {e}") from e

    required = SHEET_COLUMNS[:REQUIRED_COLUMNS]
    missing = [name for name in required if partner[name] is None]
    if missing:
        raise InvalidPartnerDataError(f"Row is missing {', '.join(missing)}: {row}")

    invalid = [
        name for name in NUMERIC_COLUMNS
        if partner[name] is not None and (not math.isfinite(partner[name]) or partner[name] < 0)
    ]
    if invalid:
        raise InvalidPartnerDataError(f"Negative or non-finite value for {', '.join(invalid)}: {row}")

    if partner["max_loan_amount"] < partner["min_loan_amount"]:
        raise InvalidPartnerDataError(
            f"{partner['name']}: max loan amount {partner['max_loan_amount']} is below minimum {partner['min_loan_amount']}"
        )

    return partner


class SheetsClient:
    """Client for the Google Sheets v4 values API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.sheets_api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def fetch_rows(self, spreadsheet_id: str, cell_range: str, api_key: str) -> List[List[Any]]:
        """
        Fetch raw cell values for a range.

        Raises:
            SheetsAPIError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(
                    f"{self.base_url}/spreadsheets/{spreadsheet_id}/values/{cell_range}",
                    params={"key": api_key},
                )
                response.raise_for_status()
                data = response.json()
                values = data.get("values", [])
                if not isinstance(values, list):
                    raise SheetsAPIError("Sheets response 'values' is not a list")
                return values

            except httpx.TimeoutException as e:
                raise SheetsAPIError(f"Sheets API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise SheetsAPIError(f"Sheets API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise SheetsAPIError(f"Sheets API unreachable: {e}") from e
            except (ValueError, AttributeError) as e:
                raise SheetsAPIError(f"Invalid response from Sheets API: {e}") from e

    async def fetch_partners(self, spreadsheet_id: str, cell_range: str, api_key: str) -> List[Dict[str, Any]]:
        """Fetch and parse partner rows"""
        rows = await self.fetch_rows(spreadsheet_id, cell_range, api_key)
        return [parse_partner_row(row) for row in rows]


def sync_partners(sheet_partners: List[Dict[str, Any]], repository) -> SyncResult:
    """
    Upsert spreadsheet partners into the catalog.

    Partners are matched on (name, loan_type); a match whose fields differ
    is updated, an unknown partner is created.
    """
    result = SyncResult()
    existing = {(p.name, p.loan_type): p for p in repository.list_partners()}

    for sheet_partner in sheet_partners:
        key = (sheet_partner["name"], sheet_partner["loan_type"])
        current = existing.get(key)
        if current is None:
            existing[key] = repository.create_partner(**sheet_partner)
            result.added += 1
            sheets_sync_counter.labels(result="added").inc()
        elif any(getattr(current, key) != value for key, value in sheet_partner.items()):
            repository.update_partner(current.id, **sheet_partner)
            result.updated += 1
            sheets_sync_counter.labels(result="updated").inc()
        else:
            result.unchanged += 1
            sheets_sync_counter.labels(result="unchanged").inc()

    return result
