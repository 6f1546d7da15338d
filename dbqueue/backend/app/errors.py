# dbqueue/backend/app/errors.py


class QueueError(Exception):
    """Base class for every error raised by the queue."""


class ValidationError(QueueError):
    """
    Bad input from the caller: invalid queue name, queue not set,
    bad count or mode, oversized or non-JSON content.
    Raised before anything is written.
    """


class StoreError(QueueError):
    """The database failed. The original driver error is chained as __cause__."""


class ConsistencyError(QueueError):
    """The queue row could not be found right after it was upserted."""
