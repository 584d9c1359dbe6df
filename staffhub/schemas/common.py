"""
Common schemas used across multiple endpoints.
"""
from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Simple message response."""
    message: str

    class Config:
        json_schema_extra = {"example": {"message": "Operation successful"}}


class ErrorResponse(BaseModel):
    """Body of every StaffHub error response."""
    detail: str
    error: str

    class Config:
        json_schema_extra = {"example": {"detail": "Company with id '42' not found", "error": "not_found"}}


# Documented on every API route; 422 keeps FastAPI's own validation schema
ERROR_RESPONSES = {
    code: {"model": ErrorResponse}
    for code in (401, 403, 404, 409, 503)
}


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str = "1.0.0"
    backend_configured: bool = False
    service_key_configured: bool = False
