"""Request utility functions."""
from typing import Optional, Tuple
from fastapi import Request


def extract_client_metadata(request: Request) -> Tuple[Optional[str], Optional[str]]:
    """
    Extract IP address and user agent from request.

    Returns:
        Tuple of (ip_address, user_agent)
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip_address = forwarded.split(",")[0].strip()
    else:
        ip_address = request.client.host if request.client else None
    user_agent = request.headers.get("user-agent")
    return ip_address, user_agent
