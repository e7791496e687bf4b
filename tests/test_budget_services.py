"""Tests for the budget allocation, utilization and category services."""
import pytest

from app.services import (
    BudgetAllocationService,
    BudgetCategoryService,
    BudgetUtilizationService,
)
from app.store import StoreError


@pytest.fixture
def allocations(services):
    rows = [
        {'project_id': 'p1', 'category_id': 'c1', 'category_name': 'Training',
         'allocated_amount': 100, 'utilized_amount': 40, 'available_amount': 60,
         'fiscal_year': '2024-25', 'quarter': 'Q1', 'month': 'April'},
        {'project_id': 'p2', 'category_id': 'c1', 'category_name': 'Training',
         'allocated_amount': 0, 'utilized_amount': 0, 'available_amount': 30,
         'fiscal_year': '2024-25', 'quarter': 'Q2', 'month': 'July'},
        {'project_id': 'p2', 'category_id': 'c2', 'category_name': None,
         'allocated_amount': 50, 'utilized_amount': 50, 'available_amount': 0,
         'fiscal_year': '2025-26', 'quarter': 'Q1', 'month': 'April'},
    ]
    return [services.allocations.create_allocation(r) for r in rows]


class TestAllocations:

    def test_filters(self, services, allocations):
        assert len(services.allocations.list_allocations()) == 3
        assert len(services.allocations.get_allocations_by_project('p2')) == 2
        assert len(services.allocations.get_allocations_by_category('Training')) == 2
        assert len(services.allocations.get_allocations_by_fiscal_year('2024-25')) == 2
        assert len(services.allocations.get_allocations_by_quarter('2024-25', 'Q2')) == 1
        assert len(services.allocations.get_allocations_by_month('April')) == 2

    def test_budget_heads(self, services, allocations):
        heads = {h['category']: h for h in services.allocations.get_budget_heads()}

        assert set(heads) == {'Training', 'Uncategorized'}
        assert heads['Training']['allocated'] == 100
        assert heads['Training']['utilized'] == 40
        assert heads['Training']['remaining'] == 60
        assert heads['Training']['projects'] == 2
        assert heads['Training']['utilization_percentage'] == 40
        assert heads['Uncategorized']['utilization_percentage'] == 100

    def test_budget_stats(self, services, allocations):
        stats = services.allocations.get_budget_stats(allocations[:2])

        assert stats['total_allocated'] == 100
        assert stats['total_utilized'] == 40
        assert stats['utilization_rate'] == 40

    def test_check_budget_availability(self, services, allocations):
        assert services.allocations.check_budget_availability('c1', 90) is True
        assert services.allocations.check_budget_availability('c1', 91) is False
        assert services.allocations.check_budget_availability('none', 0) is True

    def test_update_delete(self, services, allocations):
        aid = allocations[0]['id']
        assert services.allocations.update_allocation(aid, {'notes': 'x'})['notes'] == 'x'
        assert services.allocations.delete_allocation(aid) is True

    def test_failure_raises(self, failing_store):
        with pytest.raises(StoreError):
            BudgetAllocationService(failing_store).get_budget_stats()


@pytest.fixture
def utilizations(services):
    rows = [
        {'csr_partner_id': 'cp1', 'project_id': 'p1', 'fiscal_year': '2024-25',
         'quarter': 'Q1', 'month': 'April', 'allocated_amount': 100,
         'utilized_amount': 90, 'available_amount': 10},
        {'csr_partner_id': 'cp1', 'project_id': 'p2', 'fiscal_year': '2024-25',
         'quarter': 'Q1', 'month': 'April', 'allocated_amount': 100,
         'utilized_amount': 20, 'available_amount': 80},
        {'csr_partner_id': 'cp2', 'project_id': 'p3', 'fiscal_year': '2024-25',
         'quarter': 'Q2', 'month': None, 'allocated_amount': 0,
         'utilized_amount': 0, 'available_amount': 0},
    ]
    return [services.utilizations.create_utilization(r) for r in rows]


class TestUtilizations:

    def test_filters(self, services, utilizations):
        assert len(services.utilizations.get_utilizations_by_partner('cp1')) == 2
        assert len(services.utilizations.get_utilizations_by_project('p3')) == 1
        assert len(services.utilizations.get_utilizations_by_fiscal_year('2024-25')) == 3
        assert len(services.utilizations.get_utilizations_by_quarter('2024-25', 'Q2')) == 1

    def test_budget_heads_by_year(self, services, utilizations):
        heads = {h['fund_head']: h for h in services.utilizations.get_budget_heads_by_year('2024-25')}

        assert set(heads) == {'April', 'Overall'}
        assert heads['April']['allocated_amount'] == 200
        assert heads['April']['utilized_amount'] == 110
        assert heads['April']['utilization_percentage'] == 55
        assert heads['April']['projects'] == 2
        assert heads['Overall']['utilization_percentage'] == 0

    def test_utilization_stats(self, services, utilizations):
        stats = services.utilizations.get_utilization_stats('2024-25')

        assert stats['total_allocated'] == 200
        assert stats['total_utilized'] == 110
        assert stats['overall_utilization_percentage'] == 55
        assert stats['total_projects'] == 3

    def test_utilization_status(self, services, utilizations):
        status = services.utilizations.get_utilization_status('2024-25')

        assert [u['project_id'] for u in status['high_utilization']] == ['p1']
        assert [u['project_id'] for u in status['low_utilization']] == ['p2']

    def test_check_budget_availability(self, services, utilizations):
        assert services.utilizations.check_budget_availability('cp1', 90) is True
        assert services.utilizations.check_budget_availability('cp1', 91) is False

    def test_failures_yield_zeroed_results(self, failing_store):
        service = BudgetUtilizationService(failing_store)

        assert service.list_utilizations() == []
        assert service.get_budget_heads_by_year('2024-25') == []
        stats = service.get_utilization_stats()
        assert stats['total_allocated'] == 0
        assert stats['overall_utilization_percentage'] == 0
        assert service.check_budget_availability('cp1', 1) is False


class TestCategories:

    @pytest.fixture
    def tree(self, store, services):
        store.insert('budget_categories', [
            {'id': 'root', 'project_id': 'p1', 'name': 'Programme', 'parent_id': None,
             'allocated_amount': 800, 'created_at': '2026-01-01T00:00:00'},
            {'id': 'grandchild', 'project_id': 'p1', 'name': 'Books', 'parent_id': 'child',
             'allocated_amount': 100, 'created_at': '2026-01-02T00:00:00'},
            {'id': 'child', 'project_id': 'p1', 'name': 'Materials', 'parent_id': 'root',
             'allocated_amount': 300, 'created_at': '2026-01-03T00:00:00'},
            {'id': 'other', 'project_id': 'p1', 'name': 'Admin', 'parent_id': None,
             'allocated_amount': 200, 'created_at': '2026-01-04T00:00:00'},
        ])

    def test_categories_oldest_first(self, services, tree):
        names = [c['name'] for c in services.categories.get_categories_by_project('p1')]
        assert names == ['Programme', 'Books', 'Materials', 'Admin']

    def test_category_tree_levels(self, services, tree):
        roots = services.categories.get_category_tree('p1')

        assert [r['name'] for r in roots] == ['Programme', 'Admin']
        child = roots[0]['children'][0]
        assert child['name'] == 'Materials' and child['level'] == 1
        assert child['children'][0]['name'] == 'Books'
        assert child['children'][0]['level'] == 2

    def test_category_tree_keeps_cycles_as_roots(self, store, services):
        store.insert('budget_categories', [
            {'id': 'a', 'project_id': 'p2', 'name': 'Transport', 'parent_id': 'b',
             'created_at': '2026-01-01T00:00:00'},
            {'id': 'b', 'project_id': 'p2', 'name': 'Fuel', 'parent_id': 'a',
             'created_at': '2026-01-02T00:00:00'},
            {'id': 'c', 'project_id': 'p2', 'name': 'Diesel', 'parent_id': 'b',
             'created_at': '2026-01-03T00:00:00'},
            {'id': 'd', 'project_id': 'p2', 'name': 'Misc', 'parent_id': 'd',
             'created_at': '2026-01-04T00:00:00'},
        ])
        roots = services.categories.get_category_tree('p2')

        assert [r['name'] for r in roots] == ['Transport', 'Fuel', 'Misc']
        assert {r['level'] for r in roots} == {0}
        fuel = roots[1]
        assert [c['name'] for c in fuel['children']] == ['Diesel']
        assert fuel['children'][0]['level'] == 1
        assert roots[0]['children'] == [] and roots[2]['children'] == []

    def test_delete_category_removes_descendants(self, services, tree):
        assert services.categories.delete_category('root') is True
        assert [c['id'] for c in services.categories.get_categories_by_project('p1')] == ['other']

    def test_delete_missing_category(self, services):
        assert services.categories.delete_category('missing') is False

    def test_create_categories_batch(self, services):
        rows = services.categories.create_categories([
            {'project_id': 'p9', 'name': 'A', 'allocated_amount': 1},
            {'project_id': 'p9', 'name': 'B', 'allocated_amount': 2},
        ])
        assert len(rows) == 2
        assert services.categories.create_categories([]) == []

    def test_create_requires_name(self, services):
        with pytest.raises(ValueError):
            services.categories.create_category({'project_id': 'p1'})

    def test_update_category(self, services, tree):
        assert services.categories.update_category('other', {'name': 'Ops'})['name'] == 'Ops'

    def test_validate_budget_allocation(self):
        categories = [
            {'allocated_amount': 600},
            {'allocated_amount': 500},
            {'allocated_amount': 900, 'parent_id': 'x'},
        ]
        ok = BudgetCategoryService.validate_budget_allocation(categories, 1100)
        bad = BudgetCategoryService.validate_budget_allocation(categories, 1000)

        assert ok == {'is_valid': True, 'error': None}
        assert bad['is_valid'] is False
        assert 'exceeds project budget' in bad['error']

    def test_validate_child_allocation(self):
        children = [{'allocated_amount': 60}, {'allocated_amount': 50}]
        assert BudgetCategoryService.validate_child_allocation(110, children)['is_valid'] is True
        result = BudgetCategoryService.validate_child_allocation(100, children)
        assert result['is_valid'] is False
        assert 'exceeds parent allocation' in result['error']

    def test_validate_accepts_numeric_strings(self):
        categories = [{'allocated_amount': '600'}, {'allocated_amount': None}]
        assert BudgetCategoryService.validate_budget_allocation(categories, 500)['is_valid'] is False
        with pytest.raises(ValueError):
            BudgetCategoryService.validate_child_allocation(100, [{'allocated_amount': 'some'}])

    def test_failure_raises(self, failing_store):
        with pytest.raises(StoreError):
            BudgetCategoryService(failing_store).get_category_tree('p1')
