"""Common schemas used across the API."""

from pydantic import BaseModel

# Counts and magnitudes keep their int-ness so rendered text reads "3", not "3.0"
Number = int | float


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str
    success: bool = True
