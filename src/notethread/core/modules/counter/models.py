"""Auto-incrementing counters for sequential numeric ids."""

from enum import StrEnum


class CounterType(StrEnum):
    """Entities that get sequential numeric ids.

    Each type has one document in the `counters` collection: {counter_type, seq},
    indexed on counter_type - unique. The next id is seq + 1.
    """

    ACCOUNT = "account"
    NOTE = "note"
    COMMENT = "comment"
