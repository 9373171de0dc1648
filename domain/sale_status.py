"""
Domain: Sale status dimensions.

A sale carries three status dimensions that move independently of each other:
- Commercial status (the sale itself)
- Logistic status (the SIM/device shipment)
- Line status (activation of the phone line)

No transition table is enforced here. Every combination of values is a valid
input to triage; transitions are applied by whoever owns the record.

Raw values coming from the stores are not always canonical. The back-office
screens and the shipping provider use Spanish labels ("ENTREGADO",
"RENDIDO AL CLIENTE", "Pendiente"...), so each enum exposes a lenient
`parse()` that accepts either form and returns None for anything unknown.
"""

from __future__ import annotations

import unicodedata
from enum import Enum
from typing import Any, Dict, Optional, Union


def _normalize_label(raw: Any) -> str:
    """Uppercase, strip accents and collapse separators so labels compare loosely."""

    text = unicodedata.normalize("NFKD", str(raw))
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = text.strip().upper().replace("-", " ").replace("_", " ")
    return " ".join(text.split())


class _ParsableStatus(str, Enum):
    """Mixin giving each status enum a non-raising parser with alias support."""

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {}

    @classmethod
    def parse(cls, raw: Any) -> Optional["_ParsableStatus"]:
        """
        Resolve a raw value into a member of this enum.

        Accepts a member, its canonical name, or a known alias. Case, accents,
        underscores and extra whitespace are ignored.

        Returns None if the value is empty or unknown; never raises.
        """

        if raw is None:
            return None
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, Enum):
            raw = raw.value

        key = _normalize_label(raw)
        if not key:
            return None

        for member in cls:
            if _normalize_label(member.value) == key:
                return member

        alias = cls._aliases().get(key)
        if alias is not None:
            return cls(alias)
        return None


class CommercialStatus(_ParsableStatus):
    INITIAL = "INITIAL"
    IN_PROGRESS = "IN_PROGRESS"
    PENDING_DOCUMENTATION = "PENDING_DOCUMENTATION"
    APPROVED = "APPROVED"
    ACTIVATED = "ACTIVATED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {
            "INICIAL": "INITIAL",
            "EN PROCESO": "IN_PROGRESS",
            "PENDIENTE DOCUMENTACION": "PENDING_DOCUMENTATION",
            "APROBADO": "APPROVED",
            "ACTIVADO": "ACTIVATED",
            "RECHAZADO": "REJECTED",
            "CANCELADO": "CANCELLED",
        }


class BackOfficeStatus(_ParsableStatus):
    """Coarse three-value status used by the back-office follow-up view."""

    COMPLETED = "COMPLETED"
    PENDING = "PENDING"
    CANCELLED = "CANCELLED"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {
            "COMPLETADA": "COMPLETED",
            "PENDIENTE": "PENDING",
            "CANCELADA": "CANCELLED",
        }


class LogisticStatus(_ParsableStatus):
    INITIAL = "INITIAL"
    ASSIGNED = "ASSIGNED"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    RETURNED_TO_CUSTOMER = "RETURNED_TO_CUSTOMER"
    IN_RETURN = "IN_RETURN"
    NOT_DELIVERED = "NOT_DELIVERED"
    LOST_PACKAGE = "LOST_PACKAGE"
    SETTLED_WITH_CUSTOMER = "SETTLED_WITH_CUSTOMER"
    RECEIVED_AT_LOGISTICS_CENTER = "RECEIVED_AT_LOGISTICS_CENTER"
    RECEIVED_AT_AGENCY = "RECEIVED_AT_AGENCY"
    RECEIVED_AT_PICKUP_CENTER = "RECEIVED_AT_PICKUP_CENTER"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {
            "INICIAL": "INITIAL",
            "ASIGNADO": "ASSIGNED",
            "EN TRANSITO": "IN_TRANSIT",
            "ENTREGADO": "DELIVERED",
            "DEVUELTO AL CLIENTE": "RETURNED_TO_CUSTOMER",
            "EN DEVOLUCION": "IN_RETURN",
            "NO ENTREGADO": "NOT_DELIVERED",
            "PIEZA EXTRAVIADA": "LOST_PACKAGE",
            "RENDIDO AL CLIENTE": "SETTLED_WITH_CUSTOMER",
            "INGRESADO CENTRO LOGISTICO ECOMMERCE": "RECEIVED_AT_LOGISTICS_CENTER",
            "INGRESADO EN AGENCIA": "RECEIVED_AT_AGENCY",
            "INGRESADO PICK UP CENTER UES": "RECEIVED_AT_PICKUP_CENTER",
        }


class LineStatus(_ParsableStatus):
    PENDING_PRELOAD = "PENDING_PRELOAD"
    PRELOADED = "PRELOADED"
    AUDIT_OK = "AUDIT_OK"
    PENDING_PORTABILITY = "PENDING_PORTABILITY"
    TECHNICAL_ERROR = "TECHNICAL_ERROR"
    ACTIVE = "ACTIVE"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {
            "PENDIENTE PRECARGA": "PENDING_PRELOAD",
            "PRECARGADA": "PRELOADED",
            "AUDITORIA OK": "AUDIT_OK",
            "PENDIENTE PORTABILIDAD": "PENDING_PORTABILITY",
            "ERROR TECNICO": "TECHNICAL_ERROR",
            "ACTIVA": "ACTIVE",
        }


class ProductType(_ParsableStatus):
    PORTABILITY = "PORTABILITY"
    NEW_LINE = "NEW_LINE"
    BAF = "BAF"
    FIBER = "FIBER"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {
            "PORTABILIDAD": "PORTABILITY",
            "LINEA NUEVA": "NEW_LINE",
            "FIBRA": "FIBER",
        }


class OriginMarket(_ParsableStatus):
    PREPAID = "PREPAID"
    POSTPAID = "POSTPAID"

    @classmethod
    def _aliases(cls) -> Dict[str, str]:
        return {
            "PREPAGO": "PREPAID",
            "CONTRAFACTURA": "POSTPAID",
        }


AnyCommercialStatus = Union[CommercialStatus, BackOfficeStatus]

_COARSE_BY_COMMERCIAL: Dict[CommercialStatus, BackOfficeStatus] = {
    CommercialStatus.INITIAL: BackOfficeStatus.PENDING,
    CommercialStatus.IN_PROGRESS: BackOfficeStatus.PENDING,
    CommercialStatus.PENDING_DOCUMENTATION: BackOfficeStatus.PENDING,
    CommercialStatus.APPROVED: BackOfficeStatus.COMPLETED,
    CommercialStatus.ACTIVATED: BackOfficeStatus.COMPLETED,
    CommercialStatus.REJECTED: BackOfficeStatus.CANCELLED,
    CommercialStatus.CANCELLED: BackOfficeStatus.CANCELLED,
}


def coarse_status(status: Optional[AnyCommercialStatus]) -> Optional[BackOfficeStatus]:
    """
    Collapse a commercial status onto the back-office three-value view.

    BackOfficeStatus values pass through unchanged; None stays None.
    """

    if status is None:
        return None
    if isinstance(status, BackOfficeStatus):
        return status
    return _COARSE_BY_COMMERCIAL.get(status)


def parse_commercial_status(raw: Any) -> Optional[AnyCommercialStatus]:
    """
    Parse a raw commercial status in either its full or its coarse form.

    The full enumeration wins when a label is valid in both (CANCELLED).
    """

    full = CommercialStatus.parse(raw)
    if full is not None:
        return full
    return BackOfficeStatus.parse(raw)


__all__ = [
    "AnyCommercialStatus",
    "BackOfficeStatus",
    "CommercialStatus",
    "LineStatus",
    "LogisticStatus",
    "OriginMarket",
    "ProductType",
    "coarse_status",
    "parse_commercial_status",
]
