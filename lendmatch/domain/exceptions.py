"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class AssistantAPIError(DomainException):
    """Remote language model returned an error or an unusable payload"""

    pass


class InvalidPartnerDataError(DomainException):
    """Lending partner record is malformed or violates its invariants"""

    pass


class SheetsAPIError(DomainException):
    """Google Sheets API returned an error or is unavailable"""

    pass
