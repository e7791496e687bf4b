"""Project service for business logic operations.

This module provides the service layer for project CRUD operations,
filtering, search, budget/completion updates and the dashboard roll-ups
computed from a fetched project list.
"""
import logging
from calendar import month_abbr, monthrange
from datetime import date, datetime, timezone
from typing import Optional

from app.models import ProjectStatus
from app.services.aggregation import count_by, percentage
from app.services.repository import ErrorPolicy, Repository, check_choice, require_fields
from app.store import TableStore, eq, in_, search

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ['name', 'description', 'project_code']

# metadata key prefix -> metric name
BENEFICIARY_METRICS = {
    'beneficiaries': 'beneficiaries',
    'pads_donated': 'pads',
    'meals_distributed': 'meals',
    'students_enrolled': 'students',
    'trees_planted': 'trees',
    'schools_renovated': 'schools',
}


class ProjectService:
    """CRUD, search and statistics for CSR projects.

    Reads and writes fall back to empty/None results on store failure
    unless constructed with ErrorPolicy.RAISE.
    """

    REQUIRED_FIELDS = ['name']

    def __init__(self, store: TableStore, policy: str = ErrorPolicy.DEFAULT):
        self.repo = Repository(store, 'projects', policy=policy, label='projects')

    def list_projects(self, filters: dict = None) -> list[dict]:
        """Get all projects with optional filtering and sorting.

        Args:
            filters: Optional dictionary with filter/sort parameters:
                - status: Single status string or list of statuses
                - csr_partner_id: Funding partner id
                - search: Case-insensitive term matched against name,
                  description and project code
                - sort_by: Column to sort by (default: created_at)
                - sort_dir: 'asc' or 'desc' (default: desc)

        Returns:
            List of project rows matching the filters.
        """
        filters = filters or {}
        clauses = []

        if filters.get('status'):
            status_values = filters['status']
            if isinstance(status_values, str):
                status_values = [status_values]
            clauses.append(in_('status', status_values))

        if filters.get('csr_partner_id'):
            clauses.append(eq('csr_partner_id', filters['csr_partner_id']))

        if filters.get('search'):
            clauses.append(search(SEARCH_FIELDS, filters['search']))

        sort_dir = filters.get('sort_dir', 'desc')
        return self.repo.find(
            clauses,
            order_by=filters.get('sort_by') or 'created_at',
            descending=sort_dir.lower() == 'desc',
        )

    def get_project(self, id: str) -> Optional[dict]:
        return self.repo.get(id)

    def create_project(self, data: dict) -> Optional[dict]:
        """Create a new project.

        Args:
            data: Project field values. Required: name.
                  Status defaults to planning.

        Raises:
            ValueError: If required fields are missing or status is invalid.
        """
        require_fields(data, self.REQUIRED_FIELDS)
        payload = dict(data)
        if not payload.get('status'):
            payload['status'] = ProjectStatus.PLANNING
        payload.setdefault('is_active', True)
        check_choice(payload['status'], ProjectStatus.ALL)
        return self.repo.create(payload)

    def update_project(self, id: str, data: dict) -> Optional[dict]:
        """Update an existing project.

        Any status may be set from any other status.

        Raises:
            ValueError: If a status is given and is not a valid value.
        """
        if 'status' in data:
            check_choice(data['status'], ProjectStatus.ALL)
        return self.repo.update(id, data)

    def delete_project(self, id: str) -> bool:
        return self.repo.delete(id)

    def get_projects_by_status(self, status: str) -> list[dict]:
        return self.repo.find([eq('status', status)])

    def get_projects_by_partner(self, partner_id: str) -> list[dict]:
        return self.repo.find([eq('csr_partner_id', partner_id)])

    def search_projects(self, query: str) -> list[dict]:
        """Case-insensitive substring search over name, description and code."""
        if not query or not query.strip():
            return self.repo.find()
        return self.repo.find([search(SEARCH_FIELDS, query.strip())])

    def update_project_budget(self, id: str, utilization_amount: float) -> Optional[dict]:
        """Add spending to a project and recompute its completion percentage.

        Completion is utilized/total budget, capped at 100 and 0 when the
        project has no budget.
        """
        project = self.get_project(id)
        if not project:
            return None

        utilized = (project.get('utilized_budget') or 0) + utilization_amount
        completion = percentage(utilized, project.get('total_budget') or 0)
        logger.info('Recorded spending of %s on project %s', utilization_amount, id,
                    extra={'project_id': id})
        return self.repo.update(id, {
            'utilized_budget': utilized,
            'completion_percentage': min(completion, 100),
        })

    def update_project_completion(self, id: str, completion: float) -> Optional[dict]:
        """Set completion percentage, clamped to 0..100."""
        return self.repo.update(id, {
            'completion_percentage': min(max(completion, 0), 100),
        })

    def update_project_status(self, id: str, status: str,
                              completion: Optional[float] = None) -> Optional[dict]:
        """Set status, optionally together with a completion percentage.

        Raises:
            ValueError: If status is invalid.
        """
        check_choice(status, ProjectStatus.ALL)
        changes = {'status': status}
        if completion is not None:
            changes['completion_percentage'] = min(max(completion, 0), 100)
        return self.repo.update(id, changes)

    def archive_project(self, id: str) -> Optional[dict]:
        """Soft delete: clear is_active and move the project to archived."""
        logger.info('Archiving project %s', id, extra={'project_id': id})
        return self.repo.update(id, {
            'is_active': False,
            'status': ProjectStatus.ARCHIVED,
        })

    def get_project_budget_overview(self, id: str) -> Optional[dict]:
        """Budget position of one project, or None if it does not exist.

        available_budget is floored at 0; over_budget reports whether
        spending has exceeded the total budget.
        """
        project = self.get_project(id)
        if not project:
            return None

        total = project.get('total_budget') or 0
        utilized = project.get('utilized_budget') or 0
        available = total - utilized
        return {
            'project_id': project['id'],
            'project_name': project.get('name'),
            'total_budget': total,
            'approved_budget': project.get('approved_budget') or 0,
            'utilized_budget': utilized,
            'pending_budget': project.get('pending_budget') or 0,
            'available_budget': max(0, available),
            'utilization_percentage': percentage(utilized, total),
            'over_budget': available < 0,
        }

    # ========================================================================
    # Dashboard roll-ups
    # ========================================================================

    def get_project_stats(self, projects: list[dict] = None) -> dict:
        """Count projects per status.

        Args:
            projects: Rows to count; fetched when not given.

        Returns:
            Dictionary with total, one count per status, and 'ongoing'
            (an alias for active used by the dashboard).
        """
        if projects is None:
            projects = self.list_projects()
        stats = count_by(projects, 'status', ProjectStatus.ALL)
        stats['ongoing'] = stats[ProjectStatus.ACTIVE]
        return stats

    def get_beneficiary_metrics(self, projects: list[dict] = None) -> dict:
        """Sum current/target impact figures from each project's metadata.

        Returns:
            Mapping metric name -> {'current': n, 'target': n}.
        """
        if projects is None:
            projects = self.list_projects()

        metrics = {name: {'current': 0, 'target': 0} for name in BENEFICIARY_METRICS.values()}
        for project in projects:
            meta = project.get('metadata') or {}
            for prefix, name in BENEFICIARY_METRICS.items():
                metrics[name]['current'] += meta.get(f'{prefix}_current') or 0
                metrics[name]['target'] += meta.get(f'{prefix}_target') or 0
        return metrics

    def get_monthly_performance(self, projects: list[dict] = None,
                                today: Optional[date] = None) -> list[dict]:
        """Completed vs ongoing project counts for up to six months.

        Covers the current calendar year from six months back (or January)
        through the current month. A project counts as completed in a month
        when its expected end date falls in that month; as ongoing when it
        is active and started on or before the month's last day.

        Returns:
            List of {'month': 'Jan', 'completed': n, 'ongoing': n}.
        """
        if projects is None:
            projects = self.list_projects()
        today = today or datetime.now(timezone.utc).date()

        performance = []
        for month in range(max(1, today.month - 5), today.month + 1):
            month_start = date(today.year, month, 1).isoformat()
            month_end = date(today.year, month, monthrange(today.year, month)[1]).isoformat()

            completed = sum(
                1 for p in projects
                if p.get('status') == ProjectStatus.COMPLETED
                and p.get('expected_end_date')
                and month_start <= p['expected_end_date'][:10] <= month_end
            )
            ongoing = sum(
                1 for p in projects
                if p.get('status') == ProjectStatus.ACTIVE
                and p.get('start_date')
                and p['start_date'][:10] <= month_end
            )
            performance.append({
                'month': month_abbr[month],
                'completed': completed,
                'ongoing': ongoing,
            })
        return performance
