"""Budget services: allocations, utilizations and category hierarchies.

Allocations earmark money per project and budget category. Utilizations
track partner-level spending per fiscal year and month. Categories form a
per-project tree of budget heads.
"""
import logging
from typing import Optional

from app.services.aggregation import (
    distinct_count,
    group_totals,
    percentage,
    sum_field,
    summarize_allocations,
)
from app.services.repository import ErrorPolicy, Repository, require_fields
from app.store import TableStore, eq
from app.store.base import to_number

logger = logging.getLogger(__name__)

# Utilized/allocated ratios bounding the high and low utilization buckets
HIGH_UTILIZATION = 0.8
LOW_UTILIZATION = 0.3


def _sum_amounts(categories: list[dict]) -> float:
    """Total allocated_amount over category payloads that may carry numeric strings."""
    return sum(
        to_number('allocated_amount', cat.get('allocated_amount'), float) or 0
        for cat in categories
    )


class BudgetAllocationService:
    """Budget allocations per project and category."""

    def __init__(self, store: TableStore, policy: str = ErrorPolicy.RAISE):
        self.repo = Repository(
            store, 'budget_allocation', policy=policy, label='budget allocations',
        )

    def list_allocations(self) -> list[dict]:
        return self.repo.find()

    def get_allocation(self, id: str) -> Optional[dict]:
        return self.repo.get(id)

    def get_allocations_by_project(self, project_id: str) -> list[dict]:
        return self.repo.find([eq('project_id', project_id)])

    def get_allocations_by_category(self, category_name: str) -> list[dict]:
        return self.repo.find([eq('category_name', category_name)])

    def get_allocations_by_fiscal_year(self, fiscal_year: str) -> list[dict]:
        return self.repo.find(
            [eq('fiscal_year', fiscal_year)],
            order_by='category_name', descending=False,
        )

    def get_allocations_by_quarter(self, fiscal_year: str, quarter: str) -> list[dict]:
        return self.repo.find(
            [eq('fiscal_year', fiscal_year), eq('quarter', quarter)],
            order_by='category_name', descending=False,
        )

    def get_allocations_by_month(self, month: str) -> list[dict]:
        return self.repo.find(
            [eq('month', month)],
            order_by='category_name', descending=False,
        )

    def create_allocation(self, data: dict) -> Optional[dict]:
        return self.repo.create(data)

    def update_allocation(self, id: str, data: dict) -> Optional[dict]:
        return self.repo.update(id, data)

    def delete_allocation(self, id: str) -> bool:
        return self.repo.delete(id)

    def get_budget_heads(self, allocations: list[dict] = None) -> list[dict]:
        """Roll allocations up by category name.

        Allocations without a category are grouped under 'Uncategorized'.

        Returns:
            One entry per category in first-seen order with allocated,
            utilized, remaining, the number of allocations and the
            utilization percentage (0 when nothing is allocated).
        """
        if allocations is None:
            allocations = self.list_allocations()

        groups = group_totals(
            allocations, 'category_name', ['allocated_amount', 'utilized_amount'],
        )
        heads = []
        for category, group in groups.items():
            allocated = group['allocated_amount']
            utilized = group['utilized_amount']
            heads.append({
                'id': group['first_id'],
                'category': category,
                'allocated': allocated,
                'utilized': utilized,
                'remaining': allocated - utilized,
                'projects': group['count'],
                'utilization_percentage': percentage(utilized, allocated),
            })
        return heads

    def get_budget_stats(self, allocations: list[dict] = None) -> dict:
        """Totals across allocations; see summarize_allocations."""
        if allocations is None:
            allocations = self.list_allocations()
        return summarize_allocations(allocations)

    def check_budget_availability(self, category_id: str, required_amount: float) -> bool:
        """True if the category's available amounts cover required_amount."""
        allocations = self.repo.find(
            [eq('category_id', category_id)], columns=['available_amount'],
        )
        return sum_field(allocations, 'available_amount') >= required_amount


class BudgetUtilizationService:
    """Partner-level budget utilization records and their roll-ups."""

    def __init__(self, store: TableStore, policy: str = ErrorPolicy.DEFAULT):
        self.repo = Repository(
            store, 'budget_utilization', policy=policy, label='budget utilizations',
        )

    def list_utilizations(self) -> list[dict]:
        return self.repo.find()

    def get_utilization(self, id: str) -> Optional[dict]:
        return self.repo.get(id)

    def get_utilizations_by_partner(self, partner_id: str) -> list[dict]:
        return self.repo.find([eq('csr_partner_id', partner_id)])

    def get_utilizations_by_project(self, project_id: str) -> list[dict]:
        return self.repo.find([eq('project_id', project_id)])

    def get_utilizations_by_fiscal_year(self, fiscal_year: str) -> list[dict]:
        return self.repo.find([eq('fiscal_year', fiscal_year)])

    def get_utilizations_by_quarter(self, fiscal_year: str, quarter: str) -> list[dict]:
        return self.repo.find([eq('fiscal_year', fiscal_year), eq('quarter', quarter)])

    def create_utilization(self, data: dict) -> Optional[dict]:
        return self.repo.create(data)

    def update_utilization(self, id: str, data: dict) -> Optional[dict]:
        return self.repo.update(id, data)

    def delete_utilization(self, id: str) -> bool:
        return self.repo.delete(id)

    def get_budget_heads_by_year(self, fiscal_year: str) -> list[dict]:
        """Roll a fiscal year's utilizations up by month.

        Records without a month are grouped under 'Overall'. Percentages
        are rounded to whole numbers.
        """
        utilizations = self.get_utilizations_by_fiscal_year(fiscal_year)
        groups = group_totals(
            utilizations, 'month', ['allocated_amount', 'utilized_amount'],
            default_label='Overall',
        )
        heads = []
        for month, group in groups.items():
            allocated = group['allocated_amount']
            utilized = group['utilized_amount']
            heads.append({
                'id': f'head-{month}',
                'fund_head': month,
                'allocated_amount': allocated,
                'utilized_amount': utilized,
                'remaining_amount': allocated - utilized,
                'utilization_percentage': percentage(utilized, allocated, ndigits=0),
                'projects': len(group['project_ids']),
            })
        return heads

    def get_utilization_stats(self, fiscal_year: Optional[str] = None) -> dict:
        """Totals across utilizations, optionally for one fiscal year.

        A failed fetch yields all-zero stats under the default policy.
        """
        filters = [eq('fiscal_year', fiscal_year)] if fiscal_year else []
        utilizations = self.repo.find(filters)

        total_allocated = sum_field(utilizations, 'allocated_amount')
        total_utilized = sum_field(utilizations, 'utilized_amount')
        return {
            'total_allocated': total_allocated,
            'total_utilized': total_utilized,
            'total_committed': sum_field(utilizations, 'committed_amount'),
            'total_pending': sum_field(utilizations, 'pending_amount'),
            'total_available': sum_field(utilizations, 'available_amount'),
            'overall_utilization_percentage': percentage(
                total_utilized, total_allocated, ndigits=0
            ),
            'budget_heads': distinct_count(utilizations, 'month'),
            'total_projects': distinct_count(utilizations, 'project_id'),
        }

    def get_utilization_status(self, fiscal_year: str) -> dict:
        """Split a fiscal year's records into high (>80%) and low (<30%) use.

        Records with no allocation appear in neither list.
        """
        utilizations = self.get_utilizations_by_fiscal_year(fiscal_year)

        def ratio(item):
            return (item.get('utilized_amount') or 0) / item['allocated_amount']

        funded = [u for u in utilizations if (u.get('allocated_amount') or 0) > 0]
        return {
            'high_utilization': [u for u in funded if ratio(u) > HIGH_UTILIZATION],
            'low_utilization': [u for u in funded if ratio(u) < LOW_UTILIZATION],
        }

    def check_budget_availability(self, partner_id: str, required_amount: float) -> bool:
        """True if the partner's available amounts cover required_amount."""
        utilizations = self.get_utilizations_by_partner(partner_id)
        return sum_field(utilizations, 'available_amount') >= required_amount


class BudgetCategoryService:
    """Hierarchical budget heads for a project."""

    REQUIRED_FIELDS = ['name']

    def __init__(self, store: TableStore, policy: str = ErrorPolicy.RAISE):
        self.repo = Repository(
            store, 'budget_categories', order_by='created_at', descending=False,
            policy=policy, label='budget categories',
        )

    def get_categories_by_project(self, project_id: str) -> list[dict]:
        """A project's categories, oldest first."""
        return self.repo.find([eq('project_id', project_id)])

    def get_category_tree(self, project_id: str) -> list[dict]:
        """Build the category hierarchy for a project.

        Each node is the category row plus ``children`` and ``level`` (0 for
        roots). A category whose parent is not among the project's
        categories, or whose parent chain leads back to itself, is treated
        as a root.
        """
        categories = self.get_categories_by_project(project_id)
        nodes = {cat['id']: {**cat, 'children': [], 'level': 0} for cat in categories}

        def in_cycle(cat_id):
            seen = set()
            current = nodes[cat_id].get('parent_id')
            while current in nodes and current not in seen:
                if current == cat_id:
                    return True
                seen.add(current)
                current = nodes[current].get('parent_id')
            return False

        roots = []
        for cat in categories:
            node = nodes[cat['id']]
            parent = nodes.get(cat.get('parent_id'))
            if parent is not None and not in_cycle(cat['id']):
                parent['children'].append(node)
            else:
                roots.append(node)

        def set_levels(children, level):
            for child in children:
                child['level'] = level
                set_levels(child['children'], level + 1)

        set_levels(roots, 0)
        return roots

    def create_category(self, data: dict) -> Optional[dict]:
        """Create one category.

        Raises:
            ValueError: If name is missing.
        """
        require_fields(data, self.REQUIRED_FIELDS)
        return self.repo.create(data)

    def create_categories(self, categories: list[dict]) -> list[dict]:
        """Create several categories in one store call.

        Raises:
            ValueError: If any category is missing a name.
        """
        for category in categories:
            require_fields(category, self.REQUIRED_FIELDS)
        if not categories:
            return []
        return self.repo.create_many(categories)

    def update_category(self, id: str, data: dict) -> Optional[dict]:
        return self.repo.update(id, data)

    def delete_category(self, id: str) -> bool:
        """Delete a category together with all of its descendants."""
        category = self.repo.get(id)
        if category is None:
            return False

        doomed = [id]
        frontier = [id]
        while frontier:
            children = self.repo.find([eq('parent_id', frontier.pop())], columns=['id'])
            for child in children:
                if child['id'] in doomed:
                    continue
                doomed.append(child['id'])
                frontier.append(child['id'])

        logger.info('Deleting budget category %s with %d descendant(s)', id, len(doomed) - 1)
        return self.repo.delete_many(doomed)

    @staticmethod
    def validate_budget_allocation(categories: list[dict], total_budget: float) -> dict:
        """Check root categories do not allocate more than the project budget.

        Returns:
            {'is_valid': bool, 'error': message or None}
        """
        roots = [cat for cat in categories if not cat.get('parent_id')]
        total_allocated = _sum_amounts(roots)
        if total_allocated > total_budget:
            return {
                'is_valid': False,
                'error': (
                    f'Total allocated (₹{total_allocated:,.2f}) exceeds '
                    f'project budget (₹{total_budget:,.2f})'
                ),
            }
        return {'is_valid': True, 'error': None}

    @staticmethod
    def validate_child_allocation(parent_amount: float, children: list[dict]) -> dict:
        """Check child categories do not exceed their parent's allocation."""
        total_children = _sum_amounts(children)
        if total_children > parent_amount:
            return {
                'is_valid': False,
                'error': (
                    f'Child categories total (₹{total_children:,.2f}) exceeds '
                    f'parent allocation (₹{parent_amount:,.2f})'
                ),
            }
        return {'is_valid': True, 'error': None}
