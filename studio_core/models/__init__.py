"""
Record types stored by the studio.
"""

from .entities import (
    ACTIVE_EXCLUDED,
    COLLECTIONS,
    CURRENCIES,
    DEFAULT_TEMPLATES,
    ENTITY_TYPES,
    UPDATE_TYPES,
    Client,
    ClientUpdate,
    Currency,
    CurrencyCode,
    FabricSource,
    Measurement,
    MeasurementTemplate,
    MeasurementUnit,
    MeasurementUpdate,
    Note,
    NoteUpdate,
    Order,
    OrderStatus,
    OrderUpdate,
    PaymentRecord,
    Record,
    RecordUpdate,
    StatusChange,
    TemplateUpdate,
    Transaction,
    TransactionType,
    TransactionUpdate,
)

__all__ = [
    "ACTIVE_EXCLUDED",
    "COLLECTIONS",
    "CURRENCIES",
    "DEFAULT_TEMPLATES",
    "ENTITY_TYPES",
    "UPDATE_TYPES",
    "Client",
    "ClientUpdate",
    "Currency",
    "CurrencyCode",
    "FabricSource",
    "Measurement",
    "MeasurementTemplate",
    "MeasurementUnit",
    "MeasurementUpdate",
    "Note",
    "NoteUpdate",
    "Order",
    "OrderStatus",
    "OrderUpdate",
    "PaymentRecord",
    "Record",
    "RecordUpdate",
    "StatusChange",
    "TemplateUpdate",
    "Transaction",
    "TransactionType",
    "TransactionUpdate",
]
