"""
Service layer — request schema, dataset lookup, and response payloads for CFaR runs.
"""

from .request import CFaRRequest
from .handler import analyze_request, build_response, handle_cfar_request, health, run_cfar_request

__all__ = [
    "CFaRRequest",
    "analyze_request",
    "build_response",
    "handle_cfar_request",
    "health",
    "run_cfar_request",
]
