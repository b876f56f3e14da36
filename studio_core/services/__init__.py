# =============================================================================
# studio_core/services/__init__.py
# Service Layer for the studio
# =============================================================================
"""
Services that compute over loaded records and never write to storage.

Usage Example:
-------------
    from studio_core.services import FinanceService, DocumentService

    finance = FinanceService()
    summary = finance.summarize(ctx.repository.transactions.list())
    print(summary.net)

    pdf = DocumentService().invoice_pdf(client, order, currency)
"""

from .base_service import BaseService, ServiceResult
from .finance_service import (
    ActivityItem,
    DashboardStats,
    FinanceService,
    FinanceSummary,
    OrderAlerts,
)
from .document_service import DocumentService

__all__ = [
    "BaseService",
    "ServiceResult",
    "ActivityItem",
    "DashboardStats",
    "FinanceService",
    "FinanceSummary",
    "OrderAlerts",
    "DocumentService",
]
