"""The two operations a sync run can apply."""

from enum import Enum


class Operation(Enum):
    """Whether a run writes secrets or removes them."""

    UPSERT = "upsert"
    DELETE = "delete"

    @property
    def past_tense(self) -> str:
        return "deleted" if self is Operation.DELETE else "created"
