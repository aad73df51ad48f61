"""
Middleware package for the Room Rental API.
"""

from room_rental.middleware.request_logging import RequestLoggingMiddleware

__all__ = ["RequestLoggingMiddleware"]
