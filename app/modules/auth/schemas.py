from enum import Enum
from pydantic import BaseModel
from typing import Optional


class AuthFailure(str, Enum):
    missing_header = "missing_header"
    invalid_token = "invalid_token"
    service_error = "service_error"


class Principal(BaseModel):
    """Identity resolved from a bearer token."""
    id: str
    email: Optional[str] = None
