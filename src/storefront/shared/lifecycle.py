"""Record lifecycle shared by every persisted storefront object.

Records are never physically deleted; they move from Active to Trashed and
stay there.
"""

from enum import Enum

from protean.exceptions import ValidationError


class RecordState(Enum):
    ACTIVE = "Active"
    TRASHED = "Trashed"


def is_live(record) -> bool:
    return record.record_state == RecordState.ACTIVE.value


def assert_live(record, label: str):
    """Reject a second trash of an already trashed record."""
    if not is_live(record):
        raise ValidationError({"record_state": [f"{label} is already trashed"]})
