"""Bulk asset lookup package."""

from .models import CertificatesResult, HostsResult, ViewResult, WebPropertiesResult
from .service import ViewService

__all__ = [
    "CertificatesResult",
    "HostsResult",
    "ViewResult",
    "ViewService",
    "WebPropertiesResult",
]
