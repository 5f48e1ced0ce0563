"""Error response schema for 4xx/5xx responses raised by the routers. 422 uses FastAPI default."""

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Single top-level field detail (string). No extra keys."""

    detail: str
