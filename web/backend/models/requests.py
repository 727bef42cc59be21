#!/usr/bin/env python3
"""
Request models for API endpoints.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, Optional, Union


class IngestRequest(BaseModel):
    """A raw channel message to ingest."""
    text: str = Field(..., min_length=1, description="Message text, stored verbatim")
    channel_id: Optional[str] = Field(None, description="Source channel identifier")
    message_id: Optional[int] = Field(None, description="Source message identifier")
    url: Optional[str] = Field(None, description="Link to the source message")


class OfferRequest(BaseModel):
    """CV used to draft a first-touch message."""
    cv: Union[str, Dict[str, Any]] = Field(..., description="CV as text or structured JSON")
