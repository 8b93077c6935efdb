"""
Custom Exception Classes for the JobMatch API
"""
from typing import Dict, Any


class JobMatchBaseException(Exception):
    """Base exception for the JobMatch API"""

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/response"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(JobMatchBaseException):
    """Raised when request data validation fails"""

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        details = kwargs.pop('details', {})
        if field:
            details['field'] = field
        if value is not None:
            details['invalid_value'] = str(value)
        super().__init__(message, error_code="VALIDATION_ERROR", details=details, **kwargs)


class DatabaseError(JobMatchBaseException):
    """Raised when database operations fail"""

    def __init__(self, message: str, operation: str = None, collection: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if operation:
            details['operation'] = operation
        if collection:
            details['collection'] = collection
        super().__init__(message, error_code="DATABASE_ERROR", details=details, **kwargs)


class StorageError(JobMatchBaseException):
    """Raised when object storage operations fail"""

    def __init__(self, message: str, file_name: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if file_name:
            details['file_name'] = file_name
        super().__init__(message, error_code="STORAGE_ERROR", details=details, **kwargs)


class ModelError(JobMatchBaseException):
    """Raised when a hosted LLM call fails or answers with nothing usable"""

    def __init__(self, message: str, model_name: str = None, provider: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if model_name:
            details['model_name'] = model_name
        if provider:
            details['provider'] = provider
        super().__init__(message, error_code="MODEL_ERROR", details=details, **kwargs)


class ProcessingError(JobMatchBaseException):
    """Raised when résumé processing fails"""

    def __init__(self, message: str, document_id: str = None, document_type: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if document_id:
            details['document_id'] = document_id
        if document_type:
            details['document_type'] = document_type
        super().__init__(message, error_code="PROCESSING_ERROR", details=details, **kwargs)


class ConfigurationError(JobMatchBaseException):
    """Raised when configuration is invalid or missing"""

    def __init__(self, message: str, config_key: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if config_key:
            details['config_key'] = config_key
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=details, **kwargs)


class AuthenticationError(JobMatchBaseException):
    """Raised when the bearer token cannot be resolved to a user"""

    def __init__(self, message: str = "Unauthorized", **kwargs):
        super().__init__(message, error_code="AUTHENTICATION_ERROR", **kwargs)


class NotFoundError(JobMatchBaseException):
    """Raised when an owned resource does not exist"""

    def __init__(self, message: str, resource: str = None, **kwargs):
        details = kwargs.pop('details', {})
        if resource:
            details['resource'] = resource
        super().__init__(message, error_code="NOT_FOUND", details=details, **kwargs)


class ExternalServiceError(JobMatchBaseException):
    """Raised when external service calls fail"""

    def __init__(self, message: str, service_name: str = None, status_code: int = None, **kwargs):
        details = kwargs.pop('details', {})
        if service_name:
            details['service_name'] = service_name
        if status_code:
            details['status_code'] = status_code
        super().__init__(message, error_code="EXTERNAL_SERVICE_ERROR", details=details, **kwargs)


STATUS_CODE_MAPPING = {
    ValidationError: 400,
    ConfigurationError: 500,
    AuthenticationError: 401,
    NotFoundError: 404,
    DatabaseError: 500,
    StorageError: 500,
    ModelError: 500,
    ProcessingError: 500,
    ExternalServiceError: 502,
}


def map_to_http_status(exc: JobMatchBaseException) -> int:
    """Map custom exceptions to HTTP status codes"""
    return STATUS_CODE_MAPPING.get(type(exc), 500)
