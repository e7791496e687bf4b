"""Task service for business logic operations.

Tasks belong to a project and are assigned to one team member. Failures
in the store are logged and re-raised by default.
"""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from app.models import TaskStatus
from app.services.aggregation import count_by, count_where
from app.services.repository import (
    ErrorPolicy,
    Repository,
    check_choice,
    require_fields,
    today_iso,
)
from app.store import TableStore, between, eq, lt, neq

logger = logging.getLogger(__name__)


class TaskService:
    """CRUD, scheduling queries and statistics for project tasks."""

    REQUIRED_FIELDS = ['title']

    def __init__(self, store: TableStore, policy: str = ErrorPolicy.RAISE):
        self.repo = Repository(store, 'tasks', policy=policy, label='tasks')

    def list_tasks(self, status: Optional[str] = None,
                   project_id: Optional[str] = None) -> list[dict]:
        """Tasks newest first, optionally narrowed by status and project."""
        filters = []
        if status:
            filters.append(eq('status', status))
        if project_id:
            filters.append(eq('project_id', project_id))
        return self.repo.find(filters)

    def get_task(self, id: str) -> Optional[dict]:
        return self.repo.get(id)

    def get_tasks_by_project(self, project_id: str) -> list[dict]:
        return self.repo.find([eq('project_id', project_id)])

    def get_tasks_by_user(self, user_id: str) -> list[dict]:
        return self.repo.find([eq('assigned_to', user_id)])

    def get_tasks_by_status(self, status: str) -> list[dict]:
        return self.repo.find([eq('status', status)])

    def get_tasks_by_date_range(self, start_date: str, end_date: str) -> list[dict]:
        """Tasks whose due date falls within [start_date, end_date]."""
        return self.repo.find(
            between('due_date', start_date, end_date),
            order_by='due_date', descending=False,
        )

    def get_overdue_tasks(self, today: Optional[date] = None) -> list[dict]:
        """Incomplete tasks whose due date is before today, earliest first."""
        today = (today or datetime.now(timezone.utc).date()).isoformat()
        return self.repo.find(
            [lt('due_date', today), neq('status', TaskStatus.COMPLETED)],
            order_by='due_date', descending=False,
        )

    def get_upcoming_tasks(self, days: int = 7, today: Optional[date] = None) -> list[dict]:
        """Incomplete tasks due between today and ``days`` days from now."""
        today = today or datetime.now(timezone.utc).date()
        end = today + timedelta(days=days)
        return self.repo.find(
            between('due_date', today.isoformat(), end.isoformat())
            + [neq('status', TaskStatus.COMPLETED)],
            order_by='due_date', descending=False,
        )

    def create_task(self, data: dict) -> Optional[dict]:
        """Create a task.

        Args:
            data: Task fields. Required: title. Status defaults to
                  not_started and completion_percentage to 0.

        Raises:
            ValueError: If title is missing or status is invalid.
        """
        require_fields(data, self.REQUIRED_FIELDS)
        payload = dict(data)
        payload.setdefault('status', TaskStatus.NOT_STARTED)
        payload.setdefault('completion_percentage', 0)
        check_choice(payload['status'], TaskStatus.ALL)
        return self.repo.create(payload)

    def update_task(self, id: str, data: dict) -> Optional[dict]:
        if 'status' in data:
            check_choice(data['status'], TaskStatus.ALL)
        return self.repo.update(id, data)

    def update_task_status(self, id: str, status: str) -> Optional[dict]:
        """Set status; completing a task stamps today's completed_date.

        Moving to any other status clears completed_date.

        Raises:
            ValueError: If status is invalid.
        """
        check_choice(status, TaskStatus.ALL)
        changes = {'status': status}
        if status == TaskStatus.COMPLETED:
            changes['completed_date'] = today_iso()
            logger.debug('Completing task %s', id, extra={'record_id': id})
        else:
            changes['completed_date'] = None
        return self.repo.update(id, changes)

    def update_task_completion(self, id: str, completion: float) -> Optional[dict]:
        """Set completion percentage, clamped to 0..100."""
        return self.repo.update(id, {
            'completion_percentage': min(max(completion, 0), 100),
        })

    def delete_task(self, id: str) -> bool:
        return self.repo.delete(id)

    def get_task_stats(self, tasks: list[dict] = None,
                       today: Optional[date] = None) -> dict:
        """Count tasks per status plus overdue incomplete tasks.

        Args:
            tasks: Rows to summarize; fetched when not given.
            today: Reference date for the overdue count.
        """
        if tasks is None:
            tasks = self.list_tasks()
        today = (today or datetime.now(timezone.utc).date()).isoformat()

        stats = count_by(tasks, 'status', TaskStatus.ALL)
        stats['overdue'] = count_where(
            tasks,
            lambda t: t.get('status') != TaskStatus.COMPLETED
            and bool(t.get('due_date'))
            and t['due_date'][:10] < today,
        )
        return stats
