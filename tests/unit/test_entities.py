# =============================================================================
# tests/unit/test_entities.py
# Unit Tests for record types and update structures
# =============================================================================

import pytest


class TestRecordParsing:
    """Test from_dict / to_dict"""

    def test_unknown_keys_are_ignored(self):
        """Extra columns from storage do not break parsing"""
        from studio_core.models.entities import Client

        client = Client.from_dict({"id": "c1", "name": "Mia", "phone": "09123", "legacy": 1})
        assert client.name == "Mia"

    def test_nested_payments_become_records(self):
        """Order payments and history parse into typed records"""
        from studio_core.models.entities import Order, OrderStatus, PaymentRecord, StatusChange

        order = Order.from_dict({
            "id": "o1",
            "client_id": "c1",
            "total_amount": 100,
            "paid_amount": 40,
            "payments": [{"id": "p1", "amount": 40, "date": "2026-03-10", "note": "Initial Deposit"}],
            "status_history": [{"status": "pending", "date": "2026-03-10T09:00:00", "note": "Order Created"}],
        })

        assert isinstance(order.payments[0], PaymentRecord)
        assert isinstance(order.status_history[0], StatusChange)
        assert order.status_history[0].status is OrderStatus.PENDING

    def test_legacy_fabric_source_maps_to_studio(self):
        """Old 'babake' fabric source reads as studio-supplied"""
        from studio_core.models.entities import FabricSource, Order

        order = Order.from_dict({"id": "o1", "client_id": "c1", "total_amount": 1, "fabric_source": "babake"})
        assert order.fabric_source is FabricSource.STUDIO

    def test_booleans_are_not_numbers(self):
        """True is rejected for numeric fields"""
        from studio_core.errors import DataValidationError
        from studio_core.models.entities import Order

        with pytest.raises(DataValidationError):
            Order.from_dict({"id": "o1", "client_id": "c1", "total_amount": True})

    def test_blank_measurement_values_are_kept(self):
        """null and NaN measurement entries read as None, text still fails"""
        from studio_core.errors import DataValidationError
        from studio_core.models.entities import Measurement

        measurement = Measurement.from_dict({
            "id": "m1", "client_id": "c1",
            "values": {"Bust": 34, "Waist": None, "Hips": float("nan")},
        })
        assert measurement.values == {"Bust": 34, "Waist": None, "Hips": None}
        assert measurement.to_dict()["values"]["Waist"] is None

        with pytest.raises(DataValidationError):
            Measurement.from_dict({"id": "m1", "client_id": "c1", "values": {"Bust": "34in"}})

    def test_invalid_enum_value_raises(self):
        """Unknown status values are rejected"""
        from studio_core.errors import DataValidationError
        from studio_core.models.entities import Order

        with pytest.raises(DataValidationError) as exc_info:
            Order.from_dict({"id": "o1", "status": "shipped"})
        assert exc_info.value.details["field"] == "status"

    def test_to_dict_uses_plain_values(self):
        """Enums serialize to their string values, nested records to dicts"""
        from studio_core.models.entities import Order, OrderStatus, PaymentRecord

        order = Order(
            id="o1",
            status=OrderStatus.IN_PROGRESS,
            payments=[PaymentRecord(id="p1", amount=10, date="2026-03-10")],
        )
        data = order.to_dict()

        assert data["status"] == "in_progress"
        assert data["fabric_source"] == "client"
        assert data["payments"] == [{"id": "p1", "amount": 10, "date": "2026-03-10", "note": None}]

    def test_round_trip(self):
        """from_dict(to_dict()) is identity"""
        from studio_core.models.entities import Measurement, MeasurementUnit

        m = Measurement(id="m1", client_id="c1", name="Blouse", unit=MeasurementUnit.CM, values={"Bust": 86.5})
        assert Measurement.from_dict(m.to_dict()) == m


class TestValidation:
    """Test required-field checks"""

    def test_missing_required_fields(self):
        """All missing fields are reported"""
        from studio_core.errors import DataValidationError
        from studio_core.models.entities import Client

        with pytest.raises(DataValidationError) as exc_info:
            Client.validate_new({"name": "  "})

        assert exc_info.value.details["missing"] == ["name", "phone"]

    def test_zero_amount_counts_as_present(self):
        """0 is a valid required number"""
        from studio_core.models.entities import Transaction

        Transaction.validate_new({"type": "expense", "amount": 0})


class TestOrderProperties:
    """Test derived order values"""

    def test_balance_and_activity(self):
        """balance_due and is_active follow amounts and status"""
        from studio_core.models.entities import Order, OrderStatus

        order = Order(total_amount=100000, paid_amount=50000)
        assert order.balance_due == 50000
        assert order.is_active

        assert not Order(status=OrderStatus.DELIVERED).is_active
        assert not Order(status=OrderStatus.COMPLETED).is_active


class TestUpdates:
    """Test optional-field update structures"""

    def test_none_means_unchanged(self):
        """Only set fields are merged"""
        from studio_core.models.entities import Client, ClientUpdate

        client = Client(id="c1", name="Mia", phone="09123", email="mia@example.com")
        updated = ClientUpdate(phone="09999").apply(client)

        assert updated.phone == "09999"
        assert updated.name == "Mia"
        assert updated.email == "mia@example.com"
        assert client.phone == "09123"

    def test_identity_fields_cannot_be_updated(self):
        """id is not an updatable field"""
        from studio_core.errors import DataValidationError
        from studio_core.models.entities import ClientUpdate

        with pytest.raises(DataValidationError):
            ClientUpdate.from_mapping({"id": "other"})

    def test_order_status_not_updatable_generically(self):
        """Status changes go through the dedicated operation"""
        from studio_core.errors import DataValidationError
        from studio_core.models.entities import OrderUpdate

        with pytest.raises(DataValidationError):
            OrderUpdate.from_mapping({"status": "completed"})

    def test_update_values_are_validated(self):
        """Invalid enum values in an update are rejected"""
        from studio_core.errors import DataValidationError
        from studio_core.models.entities import MeasurementUpdate

        with pytest.raises(DataValidationError):
            MeasurementUpdate(unit="meters").changes()

    def test_update_coerces_enum_strings(self):
        """String values become enum members on apply"""
        from studio_core.models.entities import FabricSource, Order, OrderUpdate

        updated = OrderUpdate(fabric_source="studio", fabric_cost=5000).apply(Order(id="o1"))
        assert updated.fabric_source is FabricSource.STUDIO
        assert updated.fabric_cost == 5000

    def test_update_for_wrong_entity_raises(self):
        """A client update cannot be applied to an order"""
        from studio_core.errors import DataValidationError
        from studio_core.models.entities import ClientUpdate, Order

        with pytest.raises(DataValidationError):
            ClientUpdate(name="x").apply(Order(id="o1"))
