"""Dashboard summary combining the per-entity statistics."""
import logging

logger = logging.getLogger(__name__)


class DashboardService:
    """Builds the admin dashboard payload from the entity services.

    Args:
        projects: ProjectService.
        tasks: TaskService.
        allocations: BudgetAllocationService.
        events: CalendarEventService.
        upcoming_event_days: Look-ahead window for upcoming events.
    """

    def __init__(self, projects, tasks, allocations, events, upcoming_event_days: int = 30):
        self.projects = projects
        self.tasks = tasks
        self.allocations = allocations
        self.events = events
        self.upcoming_event_days = upcoming_event_days

    def get_summary(self) -> dict:
        """Collect every dashboard figure.

        Projects are fetched once and shared by the project roll-ups.

        Returns:
            Dictionary with project_stats, beneficiary_metrics,
            monthly_performance, task_stats, budget_stats and
            upcoming_events.
        """
        projects = self.projects.list_projects()
        summary = {
            'project_stats': self.projects.get_project_stats(projects),
            'beneficiary_metrics': self.projects.get_beneficiary_metrics(projects),
            'monthly_performance': self.projects.get_monthly_performance(projects),
            'task_stats': self.tasks.get_task_stats(),
            'budget_stats': self.allocations.get_budget_stats(),
            'upcoming_events': self.events.get_upcoming_events(self.upcoming_event_days),
        }
        logger.debug('Built dashboard summary over %d project(s)', len(projects))
        return summary
