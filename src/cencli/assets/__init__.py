"""Asset models, identifiers, and hit parsing."""

from .ids import AssetClassifier, CertificateID, HostID, WebPropertyID
from .models import Asset, AssetType, Certificate, Host, WebProperty

__all__ = [
    "Asset",
    "AssetClassifier",
    "AssetType",
    "Certificate",
    "CertificateID",
    "Host",
    "HostID",
    "WebProperty",
    "WebPropertyID",
]
