"""CSR partner service.

Partners are soft-deleted: deactivation clears ``is_active`` and the
partner drops out of list_partners.
"""
import logging
from typing import Optional

from app.services.aggregation import count_where, sum_field
from app.services.repository import ErrorPolicy, Repository, require_fields
from app.store import TableStore, eq, search

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ['company_name', 'city', 'state', 'address']

# budget_utilized / budget_allocated above this counts as high utilization
HIGH_UTILIZATION_RATIO = 0.8


class CSRPartnerService:
    """CRUD, search and statistics for CSR partner organizations."""

    REQUIRED_FIELDS = ['company_name']

    def __init__(self, store: TableStore, policy: str = ErrorPolicy.DEFAULT):
        self.repo = Repository(
            store, 'csr_partners', order_by='company_name', descending=False,
            policy=policy, label='CSR partners',
        )
        self.projects = Repository(store, 'projects', policy=policy, label='projects')

    def list_partners(self) -> list[dict]:
        """Active partners sorted by company name."""
        return self.repo.find([eq('is_active', True)])

    def get_partner(self, id: str) -> Optional[dict]:
        return self.repo.get(id)

    def search_partners(self, term: str) -> list[dict]:
        """Case-insensitive match on company name, city, state or address.

        A blank term returns every active partner.
        """
        if not term or not term.strip():
            return self.list_partners()
        return self.repo.find([search(SEARCH_FIELDS, term.strip())])

    def get_partners_by_state(self, state: str) -> list[dict]:
        return self.repo.find([eq('state', state)])

    def create_partner(self, data: dict) -> Optional[dict]:
        """Create a partner; new partners are active unless stated otherwise.

        Raises:
            ValueError: If company_name is missing.
        """
        require_fields(data, self.REQUIRED_FIELDS)
        payload = dict(data)
        payload.setdefault('is_active', True)
        return self.repo.create(payload)

    def update_partner(self, id: str, data: dict) -> Optional[dict]:
        return self.repo.update(id, data)

    def deactivate_partner(self, id: str) -> bool:
        """Soft delete. Returns True if the partner existed."""
        return self.repo.update(id, {'is_active': False}) is not None

    def activate_partner(self, id: str) -> bool:
        """Undo a deactivation. Returns True if the partner existed."""
        logger.info('Reactivating partner %s', id, extra={'record_id': id})
        return self.repo.update(id, {'is_active': True}) is not None

    def get_partner_stats(self) -> dict:
        """Partner counts, total project count and summed partner budgets.

        Inactive partners count towards total_partners and total_budget.
        """
        partners = self.repo.find(columns=['id', 'is_active', 'budget_allocated'])
        return {
            'total_partners': len(partners),
            'active_partners': count_where(partners, lambda p: bool(p.get('is_active'))),
            'total_projects': self.projects.count(),
            'total_budget': sum_field(partners, 'budget_allocated'),
        }

    def get_high_utilization_partners(self) -> list[dict]:
        """Active partners that have used more than 80% of their allocation."""
        return [
            p for p in self.list_partners()
            if (p.get('budget_allocated') or 0) > 0
            and (p.get('budget_utilized') or 0) / p['budget_allocated'] > HIGH_UTILIZATION_RATIO
        ]
