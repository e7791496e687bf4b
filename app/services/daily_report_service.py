"""Daily report service.

A report is written by a field team member, submitted at the end of the
day and later approved by a manager.
"""
from typing import Optional

from app.models import TaskStatus
from app.services.repository import ErrorPolicy, Repository, utcnow_iso
from app.store import TableStore, between, eq, is_null


class DailyReportService:
    """CRUD and the submit/approve workflow for daily reports."""

    def __init__(self, store: TableStore, policy: str = ErrorPolicy.DEFAULT):
        self.repo = Repository(
            store, 'daily_reports', order_by='date', policy=policy, label='daily reports',
        )
        self.tasks = Repository(store, 'tasks', policy=policy, label='tasks')

    def list_reports(self) -> list[dict]:
        return self.repo.find()

    def get_report(self, id: str) -> Optional[dict]:
        return self.repo.get(id)

    def get_reports_by_project(self, project_id: str) -> list[dict]:
        return self.repo.find([eq('project_id', project_id)])

    def get_reports_by_user(self, user_id: str) -> list[dict]:
        return self.repo.find([eq('user_id', user_id)])

    def get_reports_by_date_range(self, start_date: str, end_date: str) -> list[dict]:
        return self.repo.find(between('date', start_date, end_date))

    def create_report(self, data: dict) -> Optional[dict]:
        return self.repo.create(data)

    def update_report(self, id: str, data: dict) -> Optional[dict]:
        return self.repo.update(id, data)

    def delete_report(self, id: str) -> bool:
        return self.repo.delete(id)

    def submit_report(self, id: str) -> Optional[dict]:
        """Stamp submitted_at with the current time."""
        return self.repo.update(id, {'submitted_at': utcnow_iso()})

    def approve_report(self, id: str, approved_by: str) -> Optional[dict]:
        """Record the approver and stamp approved_at."""
        return self.repo.update(id, {
            'approved_by': approved_by,
            'approved_at': utcnow_iso(),
        })

    def get_pending_approval_reports(self) -> list[dict]:
        """Reports with neither an approver nor an approval time."""
        return self.repo.find([is_null('approved_by'), is_null('approved_at')])

    def get_daily_report_stats(self) -> dict:
        """Task progress counts shown on the daily report page.

        Counts come from the tasks table as a whole, not from the reports.
        A failed fetch yields all-zero counts under the default policy.
        """
        tasks = self.tasks.find(columns=['status'])
        statuses = [task.get('status') for task in tasks]
        return {
            'total_tasks': len(statuses),
            'completed_tasks': statuses.count(TaskStatus.COMPLETED),
            'in_progress_tasks': statuses.count(TaskStatus.IN_PROGRESS),
            'not_started_tasks': statuses.count(TaskStatus.NOT_STARTED),
            'blocked_tasks': statuses.count(TaskStatus.BLOCKED),
        }
