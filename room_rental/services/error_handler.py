"""
Error handling service for consistent error response formatting and logging.
Every error is rendered as {"error": message, "code": CODE, "request_id": id}.
"""

from typing import Dict, Any, Optional, List
from fastapi import Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from room_rental.store.base import StoreError
from room_rental.utils.exceptions import APIException
import logging
import uuid

logger = logging.getLogger(__name__)


class ErrorHandlerService:
    """
    Formats and logs errors for the global exception handlers.
    Internal failures are reported without exposing their details.
    """
    
    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        request_id: str,
        details: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        """
        Build the error body.
        
        Args:
            error_code: Error code identifier
            message: Human-readable error message
            request_id: Request identifier for tracking
            details: Optional list of field errors
            
        Returns:
            Error response dictionary
        """
        response = {
            "error": message,
            "code": error_code,
            "request_id": request_id,
        }
        
        if details:
            response["details"] = details
        
        return response
    
    @staticmethod
    def get_request_id(request: Optional[Request]) -> str:
        """Request id assigned by the logging middleware, or a fresh one."""
        if request is not None:
            request_id = getattr(request.state, "request_id", None)
            if request_id:
                return request_id
        return str(uuid.uuid4())[:8]
    
    @staticmethod
    def handle_api_exception(
        exception: APIException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        request_id = ErrorHandlerService.get_request_id(request)
        
        logger.warning(
            f"API Exception [{request_id}]: {exception.error_code} - {exception.detail}",
            extra={
                "error_code": exception.error_code,
                "status_code": exception.status_code,
                "request_id": request_id,
                "path": request.url.path if request else None
            }
        )
        
        details = getattr(exception, "field_errors", None)
        error_response = ErrorHandlerService.format_error_response(
            error_code=exception.error_code or "API_ERROR",
            message=exception.detail,
            request_id=request_id,
            details=details
        )
        
        return JSONResponse(
            status_code=exception.status_code,
            content=error_response,
            headers=exception.headers
        )
    
    @staticmethod
    def handle_validation_error(
        exception: RequestValidationError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Render request validation failures as 400 with per-field details.
        
        Args:
            exception: FastAPI request validation error
            request: Optional FastAPI request object
            
        Returns:
            JSON response with validation error details
        """
        request_id = ErrorHandlerService.get_request_id(request)
        
        validation_details = []
        for error in exception.errors():
            field_path = ".".join(str(loc) for loc in error["loc"] if loc not in ("body", "query", "path", "form"))
            validation_details.append({
                "field": field_path,
                "message": error["msg"],
                "type": error["type"],
            })
        
        logger.warning(
            f"Validation Error [{request_id}]: {len(validation_details)} field errors",
            extra={
                "request_id": request_id,
                "path": request.url.path if request else None,
            }
        )
        
        if validation_details:
            first = validation_details[0]
            message = f"Invalid value for '{first['field']}': {first['message']}" if first["field"] else first["message"]
        else:
            message = "Request validation failed"
        
        error_response = ErrorHandlerService.format_error_response(
            error_code="VALIDATION_ERROR",
            message=message,
            request_id=request_id,
            details=validation_details
        )
        
        return JSONResponse(status_code=400, content=error_response)
    
    @staticmethod
    def handle_store_error(
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle StoreError and raw SQLAlchemy errors as upstream failures.
        
        Args:
            exception: StoreError or SQLAlchemyError
            request: Optional FastAPI request object
            
        Returns:
            500 JSON response
        """
        request_id = ErrorHandlerService.get_request_id(request)
        
        code = exception.code if isinstance(exception, StoreError) else "DATABASE_ERROR"
        logger.error(
            f"Store Error [{request_id}]: {code} - {str(exception)}",
            extra={
                "request_id": request_id,
                "path": request.url.path if request else None,
                "exception_type": type(exception).__name__
            },
            exc_info=isinstance(exception, SQLAlchemyError)
        )
        
        error_response = ErrorHandlerService.format_error_response(
            error_code="UPSTREAM_FAILURE",
            message="Backing store operation failed",
            request_id=request_id
        )
        
        return JSONResponse(status_code=500, content=error_response)
    
    @staticmethod
    def handle_http_exception(
        exception: HTTPException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Handle plain HTTP exceptions such as routing 404s and 405s."""
        request_id = ErrorHandlerService.get_request_id(request)
        
        logger.warning(
            f"HTTP Exception [{request_id}]: {exception.status_code} - {exception.detail}",
            extra={
                "status_code": exception.status_code,
                "request_id": request_id,
                "path": request.url.path if request else None
            }
        )
        
        error_response = ErrorHandlerService.format_error_response(
            error_code=f"HTTP_{exception.status_code}",
            message=str(exception.detail),
            request_id=request_id
        )
        
        return JSONResponse(
            status_code=exception.status_code,
            content=error_response,
            headers=getattr(exception, "headers", None)
        )
    
    @staticmethod
    def handle_unexpected_error(
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Handle unexpected errors with secure error responses.
        
        Args:
            exception: Unexpected exception
            request: Optional FastAPI request object
            
        Returns:
            JSON response with generic error message
        """
        request_id = ErrorHandlerService.get_request_id(request)
        
        logger.error(
            f"Unexpected Error [{request_id}]: {type(exception).__name__} - {str(exception)}",
            extra={
                "request_id": request_id,
                "path": request.url.path if request else None,
                "exception_type": type(exception).__name__,
            },
            exc_info=True
        )
        
        error_response = ErrorHandlerService.format_error_response(
            error_code="INTERNAL_SERVER_ERROR",
            message="An unexpected error occurred. Please try again later.",
            request_id=request_id
        )
        
        return JSONResponse(status_code=500, content=error_response)


def _example(code: str, message: str) -> Dict[str, Any]:
    return {
        "content": {
            "application/json": {
                "example": {"error": message, "code": code, "request_id": "abc12345"}
            }
        }
    }


# Error response schemas for OpenAPI documentation
ERROR_RESPONSES = {
    400: {"description": "Bad Request", **_example("VALIDATION_ERROR", "Missing required fields")},
    401: {"description": "Unauthorized", **_example("UNAUTHORIZED", "Unauthorized")},
    403: {"description": "Forbidden", **_example("FORBIDDEN", "Not authorized to update this room")},
    404: {"description": "Not Found", **_example("NOT_FOUND", "Room not found")},
    500: {"description": "Internal Server Error", **_example("UPSTREAM_FAILURE", "Backing store operation failed")},
}
