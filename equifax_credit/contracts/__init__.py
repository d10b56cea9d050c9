"""
Contracts (data models).

This folder defines the shapes exchanged with the bureau gateway:
- the application document and its request envelope
- the reply envelope with its opaque report sections
- the closed code sets used by both
- the transport interfaces implemented by real and mock gateway clients

Both mock and real HTTP clients use these contracts.
"""

from .application import (
    PROTOCOL_VERSION,
    ActualAddress,
    ApplicationDetails,
    ApplicationDocument,
    CommercialApplicant,
    Employment,
    EmploymentCompany,
    IdentityDocument,
    LegalEntitySubject,
    PersonSubject,
    PrivateApplicant,
    RegisteredAddress,
    RequestEnvelope,
)
from .envelopes import OPAQUE_SECTION_NAMES, OpaqueSection, ReportResponse, ResponseEnvelope
from .enums import Reason, ResponseCode
from .interfaces import AsyncGatewayTransport, GatewayTransport

__all__ = [
    # application
    "PROTOCOL_VERSION", "ActualAddress", "ApplicationDetails", "ApplicationDocument",
    "CommercialApplicant", "Employment", "EmploymentCompany", "IdentityDocument",
    "LegalEntitySubject", "PersonSubject", "PrivateApplicant", "RegisteredAddress",
    "RequestEnvelope",
    # reply
    "OPAQUE_SECTION_NAMES", "OpaqueSection", "ReportResponse", "ResponseEnvelope",
    # codes
    "Reason", "ResponseCode",
    # interfaces
    "AsyncGatewayTransport", "GatewayTransport",
]
