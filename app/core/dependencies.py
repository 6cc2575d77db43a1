"""
Common dependencies for FastAPI routes.
"""

from typing import Dict
from fastapi import Request


async def get_query_params(request: Request) -> Dict[str, str]:
    """
    Raw query string as a flat string mapping for the list query builder.

    Repeated keys keep their last value.
    """
    return dict(request.query_params)
