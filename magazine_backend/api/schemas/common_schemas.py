"""
Common schemas shared across different API endpoints
"""
from __future__ import annotations

from pydantic import BaseModel


class MessageSchema(BaseModel):
    message: str
