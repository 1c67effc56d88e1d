"""
Client modules for external service communication
"""

from .forms import (
    ExternalServiceError,
    FormsClient,
    FormStore,
    Registration,
    SubmissionGateway,
    SubmissionRejectedError,
)

__all__ = [
    "ExternalServiceError",
    "FormsClient",
    "FormStore",
    "Registration",
    "SubmissionGateway",
    "SubmissionRejectedError",
]
