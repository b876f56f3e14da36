# =============================================================================
# studio_core/offline/repository.py
# Typed CRUD over the studio's record collections
# =============================================================================
"""
StudioRepository - the single API collaborators use for record access.

Usage:
------
from studio_core.context import build_context

ctx = build_context()
repo = ctx.repository

client = repo.clients.add({"name": "Mia", "phone": "09123"})
order = repo.add_order(
    {"client_id": client.id, "description": "Silk blouse", "total_amount": 100000},
    initial_deposit=20000,
)
repo.add_order_payment(order.id, 30000)
repo.update_order_status(order.id, "in_progress")

Payment operations do NOT write the matching income transaction. Callers
that want one call ``record_payment_income`` as a separate step.
"""

from __future__ import annotations
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Sequence, TypeVar, Union

from studio_core.errors import DataValidationError
from studio_core.logging import get_logger
from studio_core.models.entities import (
    DEFAULT_TEMPLATES,
    ENTITY_TYPES,
    UPDATE_TYPES,
    Client,
    Measurement,
    MeasurementTemplate,
    Note,
    Order,
    OrderStatus,
    PaymentRecord,
    Record,
    RecordUpdate,
    StatusChange,
    TemplateUpdate,
    Transaction,
    TransactionType,
)
from studio_core.offline.data_sources import DataSource

logger = get_logger(__name__)

R = TypeVar("R", bound=Record)

INITIAL_DEPOSIT_NOTE = "Initial Deposit"
DEFAULT_PAYMENT_NOTE = "Installment"
ORDER_CREATED_NOTE = "Order Created"
PAYMENT_CATEGORY = "Client Payment"


def new_id() -> str:
    return str(uuid.uuid4())


class CollectionRepository(Generic[R]):
    """list / get / add / update / delete for one named collection."""

    def __init__(
        self,
        name: str,
        source: DataSource,
        owner_provider: Callable[[], str],
        clock: Callable[[], datetime] = datetime.now,
    ):
        if name not in ENTITY_TYPES:
            raise DataValidationError(f"Unknown collection: {name}", field="collection")
        self.name = name
        self.entity_type = ENTITY_TYPES[name]
        self.update_type = UPDATE_TYPES[name]
        self.source = source
        self.owner_provider = owner_provider
        self.clock = clock

    # =========================================================================
    # READ
    # =========================================================================

    def _parse(self, rows: Sequence[Any]) -> List[R]:
        records = []
        for row in rows:
            try:
                records.append(self.entity_type.from_dict(row))
            except DataValidationError as e:
                logger.warning(f"Skipping unreadable {self.name} record: {e}")
        return records

    def _sort(self, records: List[R]) -> List[R]:
        order_by = self.entity_type.ORDER_BY
        if not order_by:
            return records
        # Stable: records with equal keys keep stored (newest-first) order
        return sorted(records, key=lambda r: getattr(r, order_by) or "", reverse=True)

    def list(self) -> List[R]:
        """All records, newest first where the entity has a timestamp."""
        return self._sort(self._parse(self.source.fetch_all(self.name)))

    def get(self, record_id: str) -> Optional[R]:
        for record in self.list():
            if record.id == record_id:
                return record
        return None

    def count(self) -> int:
        return len(self.list())

    # =========================================================================
    # WRITE
    # =========================================================================

    def _today(self) -> str:
        return self.clock().date().isoformat()

    def _generated_fields(self) -> Dict[str, Any]:
        generated: Dict[str, Any] = {"id": new_id()}
        if self.entity_type.has_field("created_at"):
            generated["created_at"] = self.clock().isoformat()
        if self.entity_type.has_field("user_id"):
            generated["user_id"] = self.owner_provider()
        return generated

    def _build(self, partial: Mapping[str, Any]) -> R:
        if not isinstance(partial, Mapping):
            raise DataValidationError(
                f"New {self.name} record must be a mapping",
                expected="dict",
                actual=type(partial).__name__,
            )
        values = {k: v for k, v in partial.items() if v is not None}
        self.entity_type.validate_new(values)
        values.update(self._generated_fields())
        if self.entity_type.has_field("date") and not values.get("date"):
            values["date"] = self._today()
        return self.entity_type(**self.entity_type.coerce_fields(values))

    def add(self, partial: Mapping[str, Any]) -> R:
        """
        Create a record from partial fields.

        Assigns id, and created_at / user_id where the entity has them.

        Raises:
            DataValidationError: If required fields are missing or invalid
        """
        record = self._build(partial)
        self.source.insert(self.name, record.to_dict())
        logger.debug(f"Added {self.name} record {record.id}")
        return record

    def save(self, record: R) -> R:
        """Persist a full record, replacing any stored record with its id."""
        self.source.upsert(self.name, record.to_dict())
        return record

    def update(
        self,
        record_id: str,
        changes: Union[RecordUpdate, Mapping[str, Any]],
    ) -> Optional[R]:
        """
        Merge validated changes into the record with record_id.

        Returns:
            The updated record, or None when no record matches
        """
        update = changes if isinstance(changes, RecordUpdate) else self.update_type.from_mapping(changes)
        if not isinstance(update, self.update_type):
            raise DataValidationError(
                f"{type(update).__name__} cannot update {self.name}",
                expected=self.update_type.__name__,
            )
        update.changes()

        current = self.get(record_id)
        if current is None:
            logger.debug(f"Update skipped, no {self.name} record {record_id}")
            return None
        return self.save(update.apply(current))

    def delete(self, record_id: str) -> bool:
        """Remove the record with record_id. Returns False when none matched."""
        deleted = self.source.delete(self.name, record_id)
        if not deleted:
            logger.debug(f"Delete skipped, no {self.name} record {record_id}")
        return deleted


# =============================================================================
# COLLECTION-SPECIFIC REPOSITORIES
# =============================================================================

class MeasurementRepository(CollectionRepository[Measurement]):

    def list_for_client(self, client_id: str) -> List[Measurement]:
        return [m for m in self.list() if m.client_id == client_id]


class TemplateRepository(CollectionRepository[MeasurementTemplate]):
    """Templates keep their stored order; new ones go to the end."""

    def list(self) -> List[MeasurementTemplate]:
        rows = self.source.fetch_all(self.name)
        if not rows:
            self.seed_defaults()
            return [MeasurementTemplate.from_dict(t.to_dict()) for t in DEFAULT_TEMPLATES]
        return self._parse(rows)

    def seed_defaults(self) -> None:
        for template in DEFAULT_TEMPLATES:
            self._append(template)
        logger.info("Seeded built-in measurement templates")

    def _append(self, template: MeasurementTemplate) -> None:
        append = getattr(self.source, "append", None)
        if append is not None:
            append(self.name, template.to_dict())
        else:
            self.source.insert(self.name, template.to_dict())

    def add(self, partial: Mapping[str, Any]) -> MeasurementTemplate:
        self.list()  # make sure built-ins exist before the first custom template
        template = self._build(partial)
        self._append(template)
        return template

    def save_template(
        self,
        name: str,
        fields: Sequence[str],
        template_id: Optional[str] = None,
    ) -> MeasurementTemplate:
        """Update the template with template_id in place, or create a new one."""
        if template_id:
            updated = self.update(template_id, TemplateUpdate(name=name, fields=list(fields)))
            if updated is not None:
                return updated
        return self.add({"name": name, "fields": list(fields)})


class OrderRepository(CollectionRepository[Order]):
    """Orders keep paid_amount equal to the sum of their payments."""

    def add(self, partial: Mapping[str, Any], initial_deposit: float = 0) -> Order:
        """
        Create an order with its first status history entry.

        A positive initial_deposit becomes the order's first payment.
        """
        if isinstance(initial_deposit, bool) or not isinstance(initial_deposit, (int, float)):
            raise DataValidationError(
                "Initial deposit must be a number",
                field="initial_deposit",
                actual=type(initial_deposit).__name__,
            )

        values = {
            k: v for k, v in dict(partial).items()
            if k not in ("payments", "paid_amount", "status_history")
        }
        Order.validate_new({k: v for k, v in values.items() if v is not None})

        now = self.clock()
        status = Order.coerce_fields({"status": values.get("status") or OrderStatus.PENDING})["status"]

        payments = []
        if initial_deposit > 0:
            payments.append(PaymentRecord(
                id=new_id(),
                amount=initial_deposit,
                date=now.date().isoformat(),
                note=INITIAL_DEPOSIT_NOTE,
            ))

        values.update(
            status=status,
            payments=payments,
            paid_amount=initial_deposit if initial_deposit > 0 else 0,
            status_history=[StatusChange(status=status, date=now.isoformat(), note=ORDER_CREATED_NOTE)],
        )
        return super().add(values)

    def add_payment(self, order_id: str, amount: float, note: Optional[str] = None) -> Optional[Order]:
        """Append a payment dated today and store the recomputed paid_amount."""
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount <= 0:
            raise DataValidationError(
                "Payment amount must be a positive number",
                field="amount",
                actual=str(amount),
            )

        order = self.get(order_id)
        if order is None:
            logger.debug(f"Payment skipped, no order {order_id}")
            return None

        payment = PaymentRecord(
            id=new_id(),
            amount=amount,
            date=self._today(),
            note=note or DEFAULT_PAYMENT_NOTE,
        )
        payments = [*order.payments, payment]
        updated = replace(order, payments=payments, paid_amount=sum(p.amount for p in payments))
        return self.save(updated)

    def update_status(
        self,
        order_id: str,
        status: Union[OrderStatus, str],
        note: Optional[str] = None,
    ) -> Optional[Order]:
        """Set a new status and log the transition; any transition is allowed."""
        new_status = Order.coerce_fields({"status": status})["status"]

        order = self.get(order_id)
        if order is None:
            logger.debug(f"Status change skipped, no order {order_id}")
            return None

        entry = StatusChange(
            status=new_status,
            date=self.clock().isoformat(),
            note=note or f"Status changed to {new_status.value}",
        )
        updated = replace(order, status=new_status, status_history=[*order.status_history, entry])
        return self.save(updated)


# =============================================================================
# STUDIO REPOSITORY
# =============================================================================

class StudioRepository:
    """One repository per collection plus the order workflows."""

    def __init__(
        self,
        source: DataSource,
        owner_provider: Callable[[], str],
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.source = source
        self.clock = clock
        args = (source, owner_provider, clock)

        self.clients: CollectionRepository[Client] = CollectionRepository("clients", *args)
        self.orders = OrderRepository("orders", *args)
        self.measurements = MeasurementRepository("measurements", *args)
        self.notes: CollectionRepository[Note] = CollectionRepository("notes", *args)
        self.transactions: CollectionRepository[Transaction] = CollectionRepository("transactions", *args)
        self.templates = TemplateRepository("templates", *args)

        self._collections: Dict[str, CollectionRepository] = {
            "clients": self.clients,
            "orders": self.orders,
            "measurements": self.measurements,
            "notes": self.notes,
            "transactions": self.transactions,
            "templates": self.templates,
        }

    def collection(self, name: str) -> CollectionRepository:
        try:
            return self._collections[name]
        except KeyError:
            raise DataValidationError(f"Unknown collection: {name}", field="collection") from None

    # =========================================================================
    # ORDERS
    # =========================================================================

    def add_order(self, order: Mapping[str, Any], initial_deposit: float = 0) -> Order:
        return self.orders.add(order, initial_deposit=initial_deposit)

    def add_order_payment(self, order_id: str, amount: float, note: Optional[str] = None) -> Optional[Order]:
        return self.orders.add_payment(order_id, amount, note)

    def update_order_status(
        self,
        order_id: str,
        status: Union[OrderStatus, str],
        note: Optional[str] = None,
    ) -> Optional[Order]:
        return self.orders.update_status(order_id, status, note)

    def record_payment_income(
        self,
        order: Order,
        amount: float,
        note: Optional[str] = None,
        deposit: bool = False,
    ) -> Transaction:
        """Write the income transaction that matches a deposit or payment."""
        if deposit:
            description = f"Deposit: {order.description}"
        else:
            description = f"Payment: {order.description} ({note or DEFAULT_PAYMENT_NOTE})"
        return self.transactions.add({
            "type": TransactionType.INCOME,
            "amount": amount,
            "category": PAYMENT_CATEGORY,
            "description": description,
        })

    # =========================================================================
    # MEASUREMENTS & TEMPLATES
    # =========================================================================

    def list_measurements(self, client_id: str) -> List[Measurement]:
        return self.measurements.list_for_client(client_id)

    def get_templates(self) -> List[MeasurementTemplate]:
        return self.templates.list()

    def save_template(
        self,
        name: str,
        fields: Sequence[str],
        template_id: Optional[str] = None,
    ) -> MeasurementTemplate:
        return self.templates.save_template(name, fields, template_id)
