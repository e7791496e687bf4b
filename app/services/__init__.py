"""Business logic services package.

This package contains the service classes that implement business logic.
Routes call services; services talk to a table store through a
Repository. This separation keeps routes thin and logic testable.
"""
from typing import Optional

from flask import current_app

from app.services.bill_service import BillService
from app.services.budget_service import (
    BudgetAllocationService,
    BudgetCategoryService,
    BudgetUtilizationService,
)
from app.services.calendar_service import CalendarEventService
from app.services.certificate_service import CertificateService
from app.services.daily_report_service import DailyReportService
from app.services.dashboard_service import DashboardService
from app.services.media_service import MediaArticleService
from app.services.partner_service import CSRPartnerService
from app.services.project_service import ProjectService
from app.services.repository import ErrorPolicy, Repository
from app.services.task_service import TaskService
from app.store import TableStore


class ServiceRegistry:
    """Every entity service wired to one table store.

    Args:
        store: The table store shared by all services.
        config: Mapping of settings (usually ``app.config``).
    """

    def __init__(self, store: TableStore, config: Optional[dict] = None):
        config = config or {}
        self.store = store
        self.projects = ProjectService(store)
        self.partners = CSRPartnerService(store)
        self.tasks = TaskService(store)
        self.allocations = BudgetAllocationService(store)
        self.utilizations = BudgetUtilizationService(store)
        self.categories = BudgetCategoryService(store)
        self.bills = BillService(store)
        self.daily_reports = DailyReportService(store)
        self.events = CalendarEventService(store)
        self.media = MediaArticleService(store)
        self.certificates = CertificateService(store)
        self.dashboard = DashboardService(
            self.projects, self.tasks, self.allocations, self.events,
            upcoming_event_days=config.get('UPCOMING_EVENT_DAYS', 30),
        )


def get_services() -> ServiceRegistry:
    """Return the service registry of the current Flask application."""
    return current_app.extensions['csr_services']


__all__ = [
    'BillService',
    'BudgetAllocationService',
    'BudgetCategoryService',
    'BudgetUtilizationService',
    'CSRPartnerService',
    'CalendarEventService',
    'CertificateService',
    'DailyReportService',
    'DashboardService',
    'ErrorPolicy',
    'MediaArticleService',
    'ProjectService',
    'Repository',
    'ServiceRegistry',
    'TaskService',
    'get_services',
]
