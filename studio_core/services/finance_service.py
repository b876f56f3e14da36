# =============================================================================
# studio_core/services/finance_service.py
# Income / expense summaries, dashboard counts and order deadline alerts
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence

import pandas as pd

from studio_core.models.entities import Client, Currency, Note, Order, Transaction, TransactionType
from studio_core.services.base_service import BaseService

URGENT_WITHIN_DAYS = 3
ACTIVITY_LIMIT = 15

_TX_COLUMNS = ["id", "type", "amount", "category", "description", "date"]


@dataclass
class FinanceSummary:
    income: float = 0.0
    expense: float = 0.0
    by_category: Dict[str, float] = field(default_factory=dict)

    @property
    def net(self) -> float:
        return self.income - self.expense


@dataclass
class DashboardStats:
    revenue: float
    client_count: int
    active_orders: int


@dataclass
class OrderAlerts:
    """Active orders bucketed by how close their deadline is."""
    overdue: List[Order] = field(default_factory=list)
    due_today: List[Order] = field(default_factory=list)
    urgent: List[Order] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.overdue) + len(self.due_today) + len(self.urgent)


@dataclass
class ActivityItem:
    kind: str
    record_id: str
    text: str
    meta: str
    date: str
    is_new: bool = False


class FinanceService(BaseService):
    """
    Aggregations over transactions and orders, computed with pandas.

    All methods are pure: they take already-loaded records and never
    touch storage.
    """

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    @staticmethod
    def to_frame(transactions: Sequence[Transaction]) -> pd.DataFrame:
        """Transactions as a DataFrame with plain string type values."""
        if not transactions:
            return pd.DataFrame(columns=_TX_COLUMNS)
        df = pd.DataFrame([t.to_dict() for t in transactions])
        df["amount"] = pd.to_numeric(df["amount"], errors="coerce").fillna(0)
        return df[_TX_COLUMNS]

    def summarize(self, transactions: Sequence[Transaction]) -> FinanceSummary:
        df = self.to_frame(transactions)
        if df.empty:
            return FinanceSummary()

        income = df.loc[df["type"] == TransactionType.INCOME.value, "amount"].sum()
        expense = df.loc[df["type"] == TransactionType.EXPENSE.value, "amount"].sum()

        signed = df["amount"].where(df["type"] == TransactionType.INCOME.value, -df["amount"])
        by_category = signed.groupby(df["category"].fillna("")).sum()

        return FinanceSummary(
            income=float(income),
            expense=float(expense),
            by_category={str(k): float(v) for k, v in by_category.items()},
        )

    def daily_summary(self, transactions: Sequence[Transaction], day: Optional[date] = None) -> FinanceSummary:
        """Summary of the transactions dated on day (default today)."""
        day_str = (day or date.today()).isoformat()
        return self.summarize([t for t in transactions if t.date[:10] == day_str])

    def total_balance(self, transactions: Sequence[Transaction]) -> float:
        return self.summarize(transactions).net

    # =========================================================================
    # DASHBOARD
    # =========================================================================

    def dashboard_stats(
        self,
        transactions: Sequence[Transaction],
        clients: Sequence[Client],
        orders: Sequence[Order],
    ) -> DashboardStats:
        return DashboardStats(
            revenue=self.summarize(transactions).income,
            client_count=len(clients),
            active_orders=sum(1 for o in orders if o.is_active),
        )

    def order_alerts(self, orders: Sequence[Order], today: Optional[date] = None) -> OrderAlerts:
        """
        Bucket active orders by deadline.

        overdue: deadline before today; due_today: deadline today;
        urgent: deadline within the next three days. Orders without a
        readable deadline are left out.
        """
        today = today or date.today()
        alerts = OrderAlerts()

        active = [o for o in orders if o.is_active]
        if not active:
            return alerts

        deadlines = pd.to_datetime(
            pd.Series([o.deadline for o in active], dtype="object"),
            format="ISO8601",
            errors="coerce",
        )
        for order, deadline in zip(active, deadlines):
            if pd.isna(deadline):
                continue
            days_left = (deadline.date() - today).days
            if days_left < 0:
                alerts.overdue.append(order)
            elif days_left == 0:
                alerts.due_today.append(order)
            elif days_left <= URGENT_WITHIN_DAYS:
                alerts.urgent.append(order)
        return alerts

    def urgent_count(self, orders: Sequence[Order], today: Optional[date] = None) -> int:
        """Active orders due within three days, overdue ones included."""
        return self.order_alerts(orders, today).total

    def recent_activity(
        self,
        clients: Sequence[Client],
        orders: Sequence[Order],
        transactions: Sequence[Transaction],
        notes: Sequence[Note],
        currency: Currency,
        today: Optional[date] = None,
        limit: int = ACTIVITY_LIMIT,
    ) -> List[ActivityItem]:
        """Newest entries across all collections for the notifications feed."""
        today_str = (today or date.today()).isoformat()
        items: List[ActivityItem] = []

        for c in clients:
            items.append(ActivityItem("clients", c.id, f"Client Added: {c.name}", c.phone, c.created_at))
        for o in orders:
            items.append(ActivityItem(
                "orders", o.id,
                f"Order Started: {o.description[:24]}...",
                f"{o.total_amount:,.0f} {currency.symbol}",
                o.created_at,
            ))
        for index, t in enumerate(transactions):
            items.append(ActivityItem(
                "finance", t.id or f"tx-{index}",
                f"{t.category}: {t.amount:,.0f} {currency.symbol}",
                t.type.value.upper(),
                t.date,
            ))
        for n in notes:
            items.append(ActivityItem("notes", n.id, f"Note: {n.title}", n.category, n.date))

        if not items:
            return []

        when = pd.to_datetime(
            pd.Series([i.date for i in items], dtype="object"),
            format="ISO8601",
            errors="coerce",
            utc=True,
        )
        order = when.sort_values(ascending=False, na_position="last", kind="stable").index
        newest = [items[i] for i in order[:limit]]
        for item in newest:
            item.is_new = item.date[:10] >= today_str
        return newest
