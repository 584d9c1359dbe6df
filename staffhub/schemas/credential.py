"""
Credential schemas.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class GoogleDriveStatusResponse(BaseModel):
    connected: bool
    has_refresh_token: bool
    has_access_token: bool
    updated_at: Optional[datetime] = None
