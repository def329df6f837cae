"""Domain Errors - Centralized Exception Hierarchy"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error - all errors extend this"""

    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to API response dict"""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# Input Errors
class InvalidInputError(DomainError):
    """Caller handed the engine a malformed graph or no registry"""
    error_code = "INVALID_INPUT"
    http_status = 400


class WorkflowTooLargeError(InvalidInputError):
    """Graph exceeds the configured node limit"""
    error_code = "WORKFLOW_TOO_LARGE"
    http_status = 413


class InterchangeFormatError(InvalidInputError):
    """Workflow JSON could not be parsed into a graph"""
    error_code = "INTERCHANGE_FORMAT_ERROR"


# Registry Errors
class RegistryError(DomainError):
    """Node type catalogue is unusable"""
    error_code = "REGISTRY_ERROR"
    http_status = 500


class RegistryLoadError(RegistryError):
    """Catalogue source could not be read or parsed"""
    error_code = "REGISTRY_LOAD_ERROR"


class DuplicateNodeTypeError(RegistryError):
    """Two catalogue entries define the same node type"""
    error_code = "DUPLICATE_NODE_TYPE"


# Not Found Errors
class NotFoundError(DomainError):
    """Resource not found"""
    error_code = "NOT_FOUND"
    http_status = 404


class NodeTypeNotFoundError(NotFoundError):
    """Node type is not in the registry"""
    error_code = "NODE_TYPE_NOT_FOUND"
