"""Tests for the JSON API routes.

Most tests use the application served from the in-process store; a few
exercise the database-backed application end to end. Uses Flask test
client to make requests and verify responses.
"""
from datetime import datetime, timedelta, timezone

import pytest


@pytest.fixture
def project_json():
    """Sample project payload as sent by the frontend."""
    return {
        'project_code': 'PRJ-100',
        'name': 'Menstrual Hygiene Awareness',
        'description': 'Pad distribution and awareness camps',
        'status': 'active',
        'start_date': '2026-02-01',
        'expected_end_date': '2026-11-30',
        'total_budget': 400000,
        'metadata': {'pads_donated_current': 1500, 'pads_donated_target': 10000},
    }


# ============================================================================
# Health and Dashboard
# ============================================================================

class TestHealth:

    def test_health_check(self, memory_client):
        response = memory_client.get('/health')
        assert response.status_code == 200
        assert response.get_json() == {'status': 'healthy'}


class TestDashboard:

    def test_dashboard_summary(self, memory_client, sample_project):
        response = memory_client.get('/api/dashboard')
        assert response.status_code == 200
        data = response.get_json()['data']
        assert data['project_stats']['total'] == 1
        assert data['beneficiary_metrics']['students']['target'] == 500

    def test_dashboard_store_failure(self, failing_client):
        response = failing_client.get('/api/dashboard')
        assert response.status_code == 502
        assert response.get_json() == {'error': 'Data store unavailable'}


# ============================================================================
# Projects
# ============================================================================

class TestProjects:

    def test_get_projects_empty(self, memory_client):
        response = memory_client.get('/api/projects')
        assert response.status_code == 200
        assert response.get_json() == {'data': [], 'count': 0}

    def test_create_and_get_project(self, memory_client, project_json):
        response = memory_client.post('/api/projects', json=project_json)
        assert response.status_code == 201
        project = response.get_json()['data']
        assert project['name'] == project_json['name']

        response = memory_client.get(f"/api/projects/{project['id']}")
        assert response.status_code == 200
        assert response.get_json()['data']['metadata']['pads_donated_target'] == 10000

    def test_create_project_missing_name(self, memory_client):
        response = memory_client.post('/api/projects', json={'status': 'active'})
        assert response.status_code == 400
        assert 'Missing required fields' in response.get_json()['error']

    def test_create_project_invalid_status(self, memory_client, project_json):
        project_json['status'] = 'archived'
        response = memory_client.post('/api/projects', json=project_json)
        assert response.status_code == 400

    def test_create_project_without_json(self, memory_client):
        response = memory_client.post('/api/projects', data='not json')
        assert response.status_code == 400

    def test_get_missing_project(self, memory_client):
        response = memory_client.get('/api/projects/does-not-exist')
        assert response.status_code == 404
        assert 'error' in response.get_json()

    def test_filter_by_comma_separated_status(self, memory_client, services, project_json):
        services.projects.create_project(project_json)
        services.projects.create_project({'name': 'Old', 'status': 'completed'})
        services.projects.create_project({'name': 'New', 'status': 'planning'})

        response = memory_client.get('/api/projects?status=active,completed')
        assert response.get_json()['count'] == 2

    def test_search(self, memory_client, sample_project):
        response = memory_client.get('/api/projects/search?q=digital')
        assert response.get_json()['count'] == 1

    def test_stats(self, memory_client, sample_project):
        response = memory_client.get('/api/projects/stats')
        data = response.get_json()['data']
        assert data['status_counts']['active'] == 1
        assert data['status_counts']['ongoing'] == 1
        assert len(data['monthly_performance']) >= 1

    def test_add_spending(self, memory_client, sample_project):
        response = memory_client.post(
            f"/api/projects/{sample_project['id']}/budget", json={'amount': 100000},
        )
        assert response.status_code == 200
        assert response.get_json()['data']['completion_percentage'] == 10

    def test_add_spending_requires_number(self, memory_client, sample_project):
        response = memory_client.post(
            f"/api/projects/{sample_project['id']}/budget", json={'amount': 'lots'},
        )
        assert response.status_code == 400

    def test_update_and_delete(self, memory_client, sample_project):
        url = f"/api/projects/{sample_project['id']}"
        response = memory_client.put(url, json={'status': 'on_hold'})
        assert response.get_json()['data']['status'] == 'on_hold'

        assert memory_client.delete(url).status_code == 200
        assert memory_client.delete(url).status_code == 404

    def test_set_status_with_completion(self, memory_client, sample_project):
        url = f"/api/projects/{sample_project['id']}/status"
        response = memory_client.put(url, json={'status': 'completed', 'completion': 100})
        assert response.status_code == 200
        assert response.get_json()['data']['status'] == 'completed'
        assert response.get_json()['data']['completion_percentage'] == 100

        assert memory_client.put(url, json={'status': ''}).status_code == 400
        assert memory_client.put(url, json={'status': 'active', 'completion': 'half'}).status_code == 400
        assert memory_client.put('/api/projects/missing/status',
                                 json={'status': 'active'}).status_code == 404

    def test_update_rejects_null_status(self, memory_client, sample_project):
        response = memory_client.put(f"/api/projects/{sample_project['id']}", json={'status': None})
        assert response.status_code == 400

    def test_archive(self, memory_client, sample_project):
        response = memory_client.post(f"/api/projects/{sample_project['id']}/archive")
        assert response.status_code == 200
        assert response.get_json()['data']['status'] == 'archived'
        assert response.get_json()['data']['is_active'] is False
        assert memory_client.post('/api/projects/missing/archive').status_code == 404

    def test_budget_overview(self, memory_client, sample_project):
        memory_client.post(f"/api/projects/{sample_project['id']}/budget", json={'amount': 250000})
        response = memory_client.get(f"/api/projects/{sample_project['id']}/budget-overview")
        overview = response.get_json()['data']

        assert overview['available_budget'] == 750000
        assert overview['utilization_percentage'] == 25
        assert overview['over_budget'] is False
        assert memory_client.get('/api/projects/missing/budget-overview').status_code == 404

    def test_store_failure_yields_empty_list(self, failing_client):
        response = failing_client.get('/api/projects')
        assert response.status_code == 200
        assert response.get_json()['data'] == []


class TestProjectsDatabase:
    """Project routes against the SQLAlchemy-backed store."""

    def test_create_list_update(self, client, project_json):
        response = client.post('/api/projects', json=project_json)
        assert response.status_code == 201
        project_id = response.get_json()['data']['id']

        response = client.get('/api/projects')
        assert response.get_json()['count'] == 1

        response = client.put(f'/api/projects/{project_id}', json={'name': 'Renamed'})
        assert response.get_json()['data']['name'] == 'Renamed'


# ============================================================================
# Partners
# ============================================================================

class TestPartners:

    def test_create_requires_company_name(self, memory_client):
        response = memory_client.post('/api/partners', json={'city': 'Pune'})
        assert response.status_code == 400

    def test_deactivate_hides_partner(self, memory_client, sample_partner):
        response = memory_client.delete(f"/api/partners/{sample_partner['id']}")
        assert response.status_code == 200
        assert memory_client.get('/api/partners').get_json()['count'] == 0

    def test_partner_projects(self, memory_client, sample_project, sample_partner):
        response = memory_client.get(f"/api/partners/{sample_partner['id']}/projects")
        assert response.get_json()['count'] == 1

    def test_reactivate_partner(self, memory_client, sample_partner):
        url = f"/api/partners/{sample_partner['id']}"
        memory_client.delete(url)

        response = memory_client.post(f'{url}/activate')
        assert response.status_code == 200
        assert memory_client.get('/api/partners').get_json()['count'] == 1
        assert memory_client.post('/api/partners/missing/activate').status_code == 404

    def test_search_and_state(self, memory_client, sample_partner):
        assert memory_client.get('/api/partners/search?q=jamshed').get_json()['count'] == 1
        assert memory_client.get('/api/partners/search?q=pune').get_json()['count'] == 0
        assert memory_client.get('/api/partners/state/Jharkhand').get_json()['count'] == 1

    def test_stats_and_high_utilization(self, memory_client, services, sample_project):
        services.partners.create_partner({
            'company_name': 'Infosys Foundation', 'budget_allocated': '500',
            'budget_utilized': 450,
        })
        stats = memory_client.get('/api/partners/stats').get_json()['data']
        assert stats == {
            'total_partners': 2, 'active_partners': 2, 'total_projects': 1, 'total_budget': 500,
        }

        rows = memory_client.get('/api/partners/high-utilization').get_json()['data']
        assert [p['company_name'] for p in rows] == ['Infosys Foundation']


# ============================================================================
# Tasks
# ============================================================================

class TestTasks:

    def test_create_and_complete_task(self, memory_client, sample_project):
        response = memory_client.post('/api/tasks', json={
            'title': 'Install computers', 'project_id': sample_project['id'],
        })
        assert response.status_code == 201
        task = response.get_json()['data']
        assert task['status'] == 'not_started'

        response = memory_client.put(f"/api/tasks/{task['id']}/status", json={'status': 'completed'})
        assert response.status_code == 200
        assert response.get_json()['data']['completed_date']

        response = memory_client.get(f"/api/projects/{sample_project['id']}/tasks")
        assert response.get_json()['count'] == 1

    def test_invalid_status(self, memory_client, services):
        task = services.tasks.create_task({'title': 'x'})
        response = memory_client.put(f"/api/tasks/{task['id']}/status", json={'status': 'paused'})
        assert response.status_code == 400

    def test_upcoming_and_overdue(self, memory_client, services):
        today = datetime.now(timezone.utc).date()
        services.tasks.create_task({'title': 'late', 'due_date': (today - timedelta(days=1)).isoformat()})
        services.tasks.create_task({'title': 'soon', 'due_date': (today + timedelta(days=1)).isoformat()})

        overdue = memory_client.get('/api/tasks/overdue').get_json()['data']
        upcoming = memory_client.get('/api/tasks/upcoming?days=3').get_json()['data']
        assert [t['title'] for t in overdue] == ['late']
        assert [t['title'] for t in upcoming] == ['soon']

    def test_upcoming_rejects_bad_days(self, memory_client):
        assert memory_client.get('/api/tasks/upcoming?days=soon').status_code == 400

    def test_due_requires_dates(self, memory_client):
        assert memory_client.get('/api/tasks/due?start=2026-01-01').status_code == 400

    def test_store_failure(self, failing_client):
        assert failing_client.get('/api/tasks').status_code == 502


# ============================================================================
# Budgets
# ============================================================================

class TestBudgets:

    def test_allocation_stats(self, memory_client, services):
        services.allocations.create_allocation({'allocated_amount': 100, 'utilized_amount': 25})
        response = memory_client.get('/api/budget/allocations/stats')
        assert response.get_json()['data']['utilization_rate'] == 25

    def test_allocation_stats_with_string_amounts(self, memory_client):
        response = memory_client.post('/api/budget/allocations', json={'allocated_amount': '100'})
        assert response.status_code == 201
        memory_client.post('/api/budget/allocations', json={'allocated_amount': 50})

        response = memory_client.get('/api/budget/allocations/stats')
        assert response.status_code == 200
        assert response.get_json()['data']['total_allocated'] == 150

    def test_allocation_rejects_non_numeric_amount(self, memory_client):
        response = memory_client.post('/api/budget/allocations', json={'allocated_amount': 'lots'})
        assert response.status_code == 400
        assert 'allocated_amount must be a number' in response.get_json()['error']

    def test_batch_categories_rejects_non_objects(self, memory_client, sample_project):
        url = f"/api/projects/{sample_project['id']}/budget-categories"
        response = memory_client.post(url, json={'categories': [{'name': 'Hardware'}, 'Training']})
        assert response.status_code == 400
        assert 'JSON object' in response.get_json()['error']
        assert memory_client.get(url).get_json()['count'] == 0

    def test_batch_categories_over_budget(self, memory_client, sample_project):
        response = memory_client.post(
            f"/api/projects/{sample_project['id']}/budget-categories",
            json={'categories': [
                {'name': 'Hardware', 'allocated_amount': 800000},
                {'name': 'Training', 'allocated_amount': 400000},
            ]},
        )
        assert response.status_code == 400
        assert 'exceeds project budget' in response.get_json()['error']

    def test_batch_categories_and_tree(self, memory_client, sample_project):
        url = f"/api/projects/{sample_project['id']}/budget-categories"
        response = memory_client.post(url, json={'categories': [
            {'name': 'Hardware', 'allocated_amount': 600000},
            {'name': 'Training', 'allocated_amount': 400000},
        ]})
        assert response.status_code == 201
        assert response.get_json()['count'] == 2

        tree = memory_client.get(f'{url}?tree=true').get_json()['data']
        assert {node['level'] for node in tree} == {0}

    def test_utilization_heads(self, memory_client, services):
        services.utilizations.create_utilization({
            'fiscal_year': '2025-26', 'month': 'May', 'project_id': 'p1',
            'allocated_amount': 300, 'utilized_amount': 100,
        })
        response = memory_client.get('/api/budget/utilizations/years/2025-26/heads')
        heads = response.get_json()['data']
        assert heads[0]['fund_head'] == 'May'
        assert heads[0]['utilization_percentage'] == 33


# ============================================================================
# Bills, Reports, Events, Media and Certificates
# ============================================================================

class TestBills:

    def test_pay_bill(self, memory_client, services):
        bill = services.bills.create_bill({'total_amount': 750})
        response = memory_client.put(
            f"/api/bills/{bill['id']}/status", json={'status': 'paid', 'user_id': 'acct-1'},
        )
        assert response.status_code == 200
        assert response.get_json()['data']['amount_paid'] == 750

    def test_missing_bill(self, memory_client):
        assert memory_client.get('/api/bills/missing').status_code == 404


class TestDailyReports:

    def test_approve_requires_approver(self, memory_client, services):
        report = services.daily_reports.create_report({'date': '2026-05-01'})
        response = memory_client.post(f"/api/daily-reports/{report['id']}/approve", json={})
        assert response.status_code == 400

    def test_approve(self, memory_client, services):
        report = services.daily_reports.create_report({'date': '2026-05-01'})
        response = memory_client.post(
            f"/api/daily-reports/{report['id']}/approve", json={'approved_by': 'mgr-1'},
        )
        assert response.status_code == 200
        assert memory_client.get('/api/daily-reports/pending').get_json()['count'] == 0


class TestEvents:

    def test_event_stats(self, memory_client, services):
        services.events.create_event({'title': 'Camp', 'event_type': 'Workshop'})
        stats = memory_client.get('/api/events/stats').get_json()['data']
        assert stats['total'] == 1
        assert stats['by_type']['Workshop'] == 1


class TestMedia:

    def test_paged_listing(self, memory_client, services):
        for i in range(3):
            services.media.create_article({'title': f'Story {i}'})
        data = memory_client.get('/api/media?page=1&page_size=2').get_json()
        assert data['count'] == 2
        assert data['total'] == 3
        assert data['page'] == 1

    def test_invalid_status_filter(self, memory_client):
        assert memory_client.get('/api/media?status=archived').status_code == 400

    def test_bulk_delete(self, memory_client, services):
        ids = [services.media.create_article({'title': t})['id'] for t in ('a', 'b')]
        response = memory_client.post('/api/media/bulk-delete', json={'ids': ids})
        assert response.status_code == 200
        assert services.media.list_articles() == []


class TestCertificates:

    def test_create_generates_code(self, memory_client):
        response = memory_client.post('/api/certificates', json={'certificate_type': 'Annual'})
        assert response.status_code == 201
        assert response.get_json()['data']['certificate_code'].startswith('UC-')

    def test_status_on_missing_certificate(self, memory_client):
        response = memory_client.put('/api/certificates/missing/status', json={'status': 'pending'})
        assert response.status_code == 404

    def test_create_store_failure(self, failing_client):
        response = failing_client.post('/api/certificates', json={})
        assert response.status_code == 502
