class LedgerFetchError(Exception):
    """The ledger store failed to return entries for a query."""


class LedgerIntegrityError(LedgerFetchError):
    """A stored row could not be read as a valid ledger entry."""


class InvalidDateRangeError(ValueError):
    pass
