# =============================================================================
# studio_core/models/entities.py
# Record types for clients, measurements, orders, notes and bookkeeping
# =============================================================================
"""
Typed records stored in the studio's collections.

Each record is a dataclass that round-trips through the plain JSON dict kept
in storage (``from_dict`` / ``to_dict``). Field values are checked on the way
in, so a record object always holds valid enum members and numbers.

Partial updates go through one ``*Update`` structure per entity. All of its
fields are optional and ``None`` means "leave unchanged". Identifier fields
(id, created_at, user_id) are never part of an update.
"""

from __future__ import annotations
import math
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, List, Mapping, Optional, Tuple, Type, TypeVar

from studio_core.errors import DataValidationError

R = TypeVar("R", bound="Record")


# =============================================================================
# ENUMERATIONS
# =============================================================================

class OrderStatus(str, Enum):
    """Production progression. Listed in order; moving backward is allowed."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    READY_FOR_FITTING = "ready_for_fitting"
    COMPLETED = "completed"
    DELIVERED = "delivered"


class FabricSource(str, Enum):
    CLIENT = "client"
    STUDIO = "studio"

    @classmethod
    def _missing_(cls, value):
        # Records written by the first release used the studio's brand name
        if value == "babake":
            return cls.STUDIO
        return None


class MeasurementUnit(str, Enum):
    INCHES = "inches"
    CM = "cm"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class CurrencyCode(str, Enum):
    MMK = "MMK"
    USD = "USD"
    THB = "THB"
    EUR = "EUR"


@dataclass(frozen=True)
class Currency:
    code: CurrencyCode
    symbol: str
    name: str


CURRENCIES: Dict[CurrencyCode, Currency] = {
    CurrencyCode.MMK: Currency(CurrencyCode.MMK, "K", "Myanmar Kyat"),
    CurrencyCode.USD: Currency(CurrencyCode.USD, "$", "US Dollar"),
    CurrencyCode.THB: Currency(CurrencyCode.THB, "฿", "Thai Baht"),
    CurrencyCode.EUR: Currency(CurrencyCode.EUR, "€", "Euro"),
}

ACTIVE_EXCLUDED = (OrderStatus.COMPLETED, OrderStatus.DELIVERED)


# =============================================================================
# FIELD COERCION
# =============================================================================

Coercer = Callable[[Any, str], Any]


def _text(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise DataValidationError(
            f"'{name}' must be text",
            field=name,
            expected="str",
            actual=type(value).__name__,
        )
    return value


def _optional_text(value: Any, name: str) -> Optional[str]:
    return None if value is None else _text(value, name)


def _number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DataValidationError(
            f"'{name}' must be a number",
            field=name,
            expected="int | float",
            actual=type(value).__name__,
        )
    return value


def _enum(enum_cls: Type[Enum]) -> Coercer:
    def coerce(value: Any, name: str) -> Enum:
        try:
            return enum_cls(value)
        except ValueError:
            allowed = ", ".join(m.value for m in enum_cls)
            raise DataValidationError(
                f"'{name}' must be one of: {allowed}",
                field=name,
                expected=allowed,
                actual=str(value),
            ) from None
    return coerce


def _text_list(value: Any, name: str) -> List[str]:
    if not isinstance(value, (list, tuple)):
        raise DataValidationError(f"'{name}' must be a list", field=name, expected="list")
    return [_text(item, name) for item in value]


def _number_map(value: Any, name: str) -> Dict[str, Optional[float]]:
    """Blank entries (null, NaN) stay in the map as None."""
    if not isinstance(value, Mapping):
        raise DataValidationError(f"'{name}' must be a mapping", field=name, expected="dict")
    return {
        _text(k, name): None if _is_blank(v) else _number(v, name)
        for k, v in value.items()
    }


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, float) and not math.isfinite(value))


def _records(record_cls: Type[R]) -> Coercer:
    def coerce(value: Any, name: str) -> List[R]:
        if not isinstance(value, (list, tuple)):
            raise DataValidationError(f"'{name}' must be a list", field=name, expected="list")
        return [
            item if isinstance(item, record_cls) else record_cls.from_dict(item)
            for item in value
        ]
    return coerce


def _to_json_dict(items: List[Tuple[str, Any]]) -> Dict[str, Any]:
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in items}


# =============================================================================
# BASE RECORD
# =============================================================================

@dataclass
class Record:
    """Base class for stored records."""

    COERCERS: ClassVar[Dict[str, Coercer]] = {}
    REQUIRED: ClassVar[Tuple[str, ...]] = ()
    # Sort column for listings, newest first; None keeps stored order
    ORDER_BY: ClassVar[Optional[str]] = None

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def has_field(cls, name: str) -> bool:
        return name in cls.field_names()

    @classmethod
    def coerce_fields(cls, values: Mapping[str, Any]) -> Dict[str, Any]:
        """Validate and convert the given fields; unknown names are rejected."""
        known = cls.field_names()
        coerced = {}
        for name, value in values.items():
            if name not in known:
                raise DataValidationError(
                    f"{cls.__name__} has no field '{name}'",
                    field=name,
                )
            coercer = cls.COERCERS.get(name)
            coerced[name] = coercer(value, name) if coercer else value
        return coerced

    @classmethod
    def validate_new(cls, values: Mapping[str, Any]) -> None:
        """Check that required fields are present before a record is created."""
        missing = []
        for name in cls.REQUIRED:
            value = values.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        if missing:
            raise DataValidationError(
                f"{cls.__name__} is missing required fields: {', '.join(missing)}",
                field=missing[0],
                details={"missing": missing},
            )

    @classmethod
    def from_dict(cls: Type[R], data: Mapping[str, Any]) -> R:
        """Build a record from its stored form; unknown keys are ignored."""
        if not isinstance(data, Mapping):
            raise DataValidationError(
                f"{cls.__name__} must be built from a mapping",
                expected="dict",
                actual=type(data).__name__,
            )
        known = cls.field_names()
        values = {k: v for k, v in data.items() if k in known and v is not None}
        return cls(**cls.coerce_fields(values))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self, dict_factory=_to_json_dict)


# =============================================================================
# RECORDS
# =============================================================================

@dataclass
class Client(Record):
    id: str = ""
    name: str = ""
    phone: str = ""
    email: Optional[str] = None
    address: Optional[str] = None
    user_id: str = ""
    created_at: str = ""

    COERCERS: ClassVar[Dict[str, Coercer]] = {
        "id": _text, "name": _text, "phone": _text,
        "email": _optional_text, "address": _optional_text,
        "user_id": _text, "created_at": _text,
    }
    REQUIRED: ClassVar[Tuple[str, ...]] = ("name", "phone")
    ORDER_BY: ClassVar[Optional[str]] = "created_at"


@dataclass
class Measurement(Record):
    id: str = ""
    client_id: str = ""
    name: str = ""
    unit: MeasurementUnit = MeasurementUnit.INCHES
    values: Dict[str, Optional[float]] = field(default_factory=dict)
    photo_url: Optional[str] = None
    notes: Optional[str] = None
    created_at: str = ""

    COERCERS: ClassVar[Dict[str, Coercer]] = {
        "id": _text, "client_id": _text, "name": _text,
        "unit": _enum(MeasurementUnit), "values": _number_map,
        "photo_url": _optional_text, "notes": _optional_text, "created_at": _text,
    }
    REQUIRED: ClassVar[Tuple[str, ...]] = ("client_id",)
    ORDER_BY: ClassVar[Optional[str]] = "created_at"


@dataclass
class MeasurementTemplate(Record):
    id: str = ""
    name: str = ""
    fields: List[str] = field(default_factory=list)

    COERCERS: ClassVar[Dict[str, Coercer]] = {
        "id": _text, "name": _text, "fields": _text_list,
    }
    REQUIRED: ClassVar[Tuple[str, ...]] = ("name",)


@dataclass
class PaymentRecord(Record):
    id: str = ""
    amount: float = 0
    date: str = ""
    note: Optional[str] = None

    COERCERS: ClassVar[Dict[str, Coercer]] = {
        "id": _text, "amount": _number, "date": _text, "note": _optional_text,
    }


@dataclass
class StatusChange(Record):
    status: OrderStatus = OrderStatus.PENDING
    date: str = ""
    note: str = ""

    COERCERS: ClassVar[Dict[str, Coercer]] = {
        "status": _enum(OrderStatus), "date": _text, "note": _text,
    }


@dataclass
class Order(Record):
    id: str = ""
    client_id: str = ""
    description: str = ""
    status: OrderStatus = OrderStatus.PENDING
    deadline: str = ""
    fabric_source: FabricSource = FabricSource.CLIENT
    fabric_cost: float = 0
    fabric_images: List[str] = field(default_factory=list)
    total_amount: float = 0
    paid_amount: float = 0
    payments: List[PaymentRecord] = field(default_factory=list)
    status_history: List[StatusChange] = field(default_factory=list)
    created_at: str = ""
    user_id: str = ""

    COERCERS: ClassVar[Dict[str, Coercer]] = {
        "id": _text, "client_id": _text, "description": _text,
        "status": _enum(OrderStatus), "deadline": _text,
        "fabric_source": _enum(FabricSource), "fabric_cost": _number,
        "fabric_images": _text_list, "total_amount": _number,
        "paid_amount": _number, "payments": _records(PaymentRecord),
        "status_history": _records(StatusChange),
        "created_at": _text, "user_id": _text,
    }
    REQUIRED: ClassVar[Tuple[str, ...]] = ("client_id", "total_amount")
    ORDER_BY: ClassVar[Optional[str]] = "created_at"

    @property
    def payments_total(self) -> float:
        return sum(p.amount for p in self.payments)

    @property
    def balance_due(self) -> float:
        return self.total_amount - self.paid_amount

    @property
    def is_active(self) -> bool:
        return self.status not in ACTIVE_EXCLUDED


@dataclass
class Transaction(Record):
    id: str = ""
    type: TransactionType = TransactionType.INCOME
    amount: float = 0
    category: str = ""
    description: str = ""
    date: str = ""
    user_id: str = ""

    COERCERS: ClassVar[Dict[str, Coercer]] = {
        "id": _text, "type": _enum(TransactionType), "amount": _number,
        "category": _text, "description": _text, "date": _text, "user_id": _text,
    }
    REQUIRED: ClassVar[Tuple[str, ...]] = ("type", "amount")
    ORDER_BY: ClassVar[Optional[str]] = "date"


@dataclass
class Note(Record):
    id: str = ""
    title: str = ""
    content: str = ""
    category: str = ""
    date: str = ""
    user_id: str = ""

    COERCERS: ClassVar[Dict[str, Coercer]] = {
        "id": _text, "title": _text, "content": _text,
        "category": _text, "date": _text, "user_id": _text,
    }
    REQUIRED: ClassVar[Tuple[str, ...]] = ("title", "content")
    ORDER_BY: ClassVar[Optional[str]] = "date"


# =============================================================================
# UPDATE STRUCTURES
# =============================================================================

U = TypeVar("U", bound="RecordUpdate")


@dataclass
class RecordUpdate:
    """Optional-field change set for one entity type."""

    ENTITY: ClassVar[Type[Record]] = Record

    @classmethod
    def from_mapping(cls: Type[U], values: Mapping[str, Any]) -> U:
        allowed = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - allowed)
        if unknown:
            raise DataValidationError(
                f"Field(s) cannot be updated on {cls.ENTITY.__name__}: {', '.join(unknown)}",
                field=unknown[0],
                details={"allowed": sorted(allowed)},
            )
        return cls(**values)

    def changes(self) -> Dict[str, Any]:
        """Validated values of the fields that are set."""
        set_fields = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }
        return self.ENTITY.coerce_fields(set_fields)

    def apply(self, record: R) -> R:
        """Return a copy of record with the set fields merged in."""
        if not isinstance(record, self.ENTITY):
            raise DataValidationError(
                f"{type(self).__name__} cannot be applied to {type(record).__name__}"
            )
        return replace(record, **self.changes())


@dataclass
class ClientUpdate(RecordUpdate):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None

    ENTITY: ClassVar[Type[Record]] = Client


@dataclass
class MeasurementUpdate(RecordUpdate):
    client_id: Optional[str] = None
    name: Optional[str] = None
    unit: Optional[str] = None
    values: Optional[Dict[str, Optional[float]]] = None
    photo_url: Optional[str] = None
    notes: Optional[str] = None

    ENTITY: ClassVar[Type[Record]] = Measurement


@dataclass
class TemplateUpdate(RecordUpdate):
    name: Optional[str] = None
    fields: Optional[List[str]] = None

    ENTITY: ClassVar[Type[Record]] = MeasurementTemplate


@dataclass
class OrderUpdate(RecordUpdate):
    """Status and payments change only through their dedicated operations."""
    client_id: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[str] = None
    fabric_source: Optional[str] = None
    fabric_cost: Optional[float] = None
    fabric_images: Optional[List[str]] = None
    total_amount: Optional[float] = None

    ENTITY: ClassVar[Type[Record]] = Order


@dataclass
class TransactionUpdate(RecordUpdate):
    type: Optional[str] = None
    amount: Optional[float] = None
    category: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None

    ENTITY: ClassVar[Type[Record]] = Transaction


@dataclass
class NoteUpdate(RecordUpdate):
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[str] = None
    date: Optional[str] = None

    ENTITY: ClassVar[Type[Record]] = Note


# =============================================================================
# COLLECTION REGISTRY
# =============================================================================

ENTITY_TYPES: Dict[str, Type[Record]] = {
    "clients": Client,
    "orders": Order,
    "measurements": Measurement,
    "notes": Note,
    "transactions": Transaction,
    "templates": MeasurementTemplate,
}

UPDATE_TYPES: Dict[str, Type[RecordUpdate]] = {
    "clients": ClientUpdate,
    "orders": OrderUpdate,
    "measurements": MeasurementUpdate,
    "notes": NoteUpdate,
    "transactions": TransactionUpdate,
    "templates": TemplateUpdate,
}

# Backup documents list collections in this order
COLLECTIONS: Tuple[str, ...] = (
    "templates", "transactions", "clients", "measurements", "orders", "notes",
)

DEFAULT_TEMPLATES: Tuple[MeasurementTemplate, ...] = (
    MeasurementTemplate(
        id="1",
        name="Basic Blouse",
        fields=["Bust", "Waist", "Shoulder", "Sleeve Length", "Full Length"],
    ),
    MeasurementTemplate(
        id="2",
        name="Myanmar Traditional",
        fields=["Bust", "Waist", "Hips", "Shoulder", "Neck", "Full Length"],
    ),
)
