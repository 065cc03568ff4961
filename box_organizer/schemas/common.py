"""Shared field types for request validation."""
from typing import Annotated

from pydantic import StringConstraints

# Names are trimmed before length checks
BoxName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
LocationName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
WorkspaceName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
SearchText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]

MAX_BOX_DESCRIPTION_LENGTH = 10000
MAX_LOCATION_DESCRIPTION_LENGTH = 1000
MAX_WORKSPACE_DESCRIPTION_LENGTH = 1000

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100

MIN_QR_BATCH = 1
MAX_QR_BATCH = 100
QR_TOKEN_PATTERN = r"^[A-Z]{2}-[A-Z0-9]{6}$"


def require_fields(model) -> None:
    """Reject partial updates that carry no fields."""
    if not model.model_fields_set:
        raise ValueError("At least one field must be provided")
