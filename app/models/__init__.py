"""SQLAlchemy models package.

This package contains all database models for the application.
Models are imported here and exposed for use throughout the app.
"""
from app.models.bill import Bill, BillStatus, BillType
from app.models.budget import BudgetAllocation, BudgetCategory, BudgetUtilization
from app.models.calendar_event import CalendarEvent, EventStatus, EventType
from app.models.certificate import (
    CertificateStatus,
    CertificateType,
    UtilizationCertificate,
)
from app.models.daily_report import DailyReport
from app.models.media_article import ArticleStatus, MediaArticle, MediaType
from app.models.partner import CSRPartner
from app.models.project import Project, ProjectStatus
from app.models.task import Task, TaskStatus

# Table name -> model, used by the SQLAlchemy-backed table store
MODELS_BY_TABLE = {
    model.__tablename__: model
    for model in (
        Project, CSRPartner, Task, BudgetAllocation, BudgetUtilization,
        BudgetCategory, Bill, DailyReport, CalendarEvent, MediaArticle,
        UtilizationCertificate,
    )
}

__all__ = [
    'ArticleStatus',
    'Bill',
    'BillStatus',
    'BillType',
    'BudgetAllocation',
    'BudgetCategory',
    'BudgetUtilization',
    'CSRPartner',
    'CalendarEvent',
    'CertificateStatus',
    'CertificateType',
    'DailyReport',
    'EventStatus',
    'EventType',
    'MODELS_BY_TABLE',
    'MediaArticle',
    'MediaType',
    'Project',
    'ProjectStatus',
    'Task',
    'TaskStatus',
    'UtilizationCertificate',
]
