class BookkeepingError(Exception):
    """Base class for bookkeeping core failures."""
    pass

class BalanceConsistencyError(BookkeepingError):
    """Raised when a balance adjustment cannot find the project it targets.

    Fatal: the enclosing atomic block is rolled back with the triggering
    transaction write.
    """
    pass

class UnmaintainedTransactionWrite(BookkeepingError):
    """Raised when a Transaction row is written or deleted outside the ledger service."""
    pass

class ActivityLogImmutable(BookkeepingError):
    """Raised on any attempt to edit or delete an activity log entry."""
    pass
