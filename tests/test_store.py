"""Tests for the table stores.

MemoryStore is checked directly; SQLAlchemyStore runs against the
in-memory SQLite database of the app fixture.
"""
import pytest

from app import db
from app.store import (
    MemoryStore,
    StoreError,
    between,
    create_store,
    eq,
    gt,
    ilike,
    in_,
    is_null,
    neq,
    not_null,
    search,
)
from app.store.base import Filter, validate_filters
from app.store.sqlalchemy_store import SQLAlchemyStore


@pytest.fixture
def filled_store():
    store = MemoryStore()
    store.insert('tasks', [
        {'title': 'Site survey', 'status': 'completed', 'due_date': '2026-01-10'},
        {'title': 'Vendor onboarding', 'status': 'in_progress', 'due_date': '2026-02-01'},
        {'title': 'Progress review', 'status': 'not_started', 'due_date': None},
    ])
    return store


class TestMemoryStoreInsert:

    def test_insert_assigns_id_and_timestamps(self):
        store = MemoryStore()
        row = store.insert('projects', [{'name': 'A'}])[0]

        assert len(row['id']) == 36
        assert row['created_at'] == row['updated_at']

    def test_insert_keeps_given_id(self):
        store = MemoryStore()
        row = store.insert('projects', [{'id': 'p-1', 'name': 'A'}])[0]
        assert row['id'] == 'p-1'

    def test_duplicate_id_raises(self):
        store = MemoryStore()
        store.insert('projects', [{'id': 'p-1'}])
        with pytest.raises(StoreError):
            store.insert('projects', [{'id': 'p-1'}])

    def test_unknown_table_raises_when_tables_restricted(self):
        store = MemoryStore(tables=['projects'])
        with pytest.raises(StoreError):
            store.select('bills')

    def test_returned_rows_are_copies(self):
        store = MemoryStore()
        row = store.insert('projects', [{'name': 'A', 'metadata': {'x': 1}}])[0]
        row['metadata']['x'] = 99

        assert store.select('projects')[0]['metadata'] == {'x': 1}


class TestMemoryStoreSelect:

    def test_eq_and_neq(self, filled_store):
        assert len(filled_store.select('tasks', [eq('status', 'completed')])) == 1
        assert len(filled_store.select('tasks', [neq('status', 'completed')])) == 2

    def test_neq_excludes_nulls(self, filled_store):
        rows = filled_store.select('tasks', [neq('due_date', '2026-01-10')])
        assert [r['title'] for r in rows] == ['Vendor onboarding']

    def test_range_filters_skip_nulls(self, filled_store):
        rows = filled_store.select('tasks', between('due_date', '2026-01-01', '2026-01-31'))
        assert [r['title'] for r in rows] == ['Site survey']
        assert len(filled_store.select('tasks', [gt('due_date', '2000-01-01')])) == 2

    def test_in_and_null_filters(self, filled_store):
        assert len(filled_store.select('tasks', [in_('status', ['completed', 'not_started'])])) == 2
        assert len(filled_store.select('tasks', [is_null('due_date')])) == 1
        assert len(filled_store.select('tasks', [not_null('due_date')])) == 2

    def test_ilike_and_search(self, filled_store):
        assert len(filled_store.select('tasks', [ilike('title', '%SURVEY%')])) == 1
        assert len(filled_store.select('tasks', [search(['title', 'status'], 'progress')])) == 2

    def test_order_puts_nulls_last(self, filled_store):
        asc = filled_store.select('tasks', order_by='due_date')
        desc = filled_store.select('tasks', order_by='due_date', descending=True)

        assert [r['title'] for r in asc] == ['Site survey', 'Vendor onboarding', 'Progress review']
        assert [r['title'] for r in desc] == ['Vendor onboarding', 'Site survey', 'Progress review']

    def test_limit_offset_and_columns(self, filled_store):
        rows = filled_store.select(
            'tasks', order_by='title', limit=1, offset=1, columns=['title'],
        )
        assert rows == [{'title': 'Site survey'}]

    def test_unsupported_operator_is_rejected(self, filled_store):
        with pytest.raises(ValueError):
            filled_store.select('tasks', [Filter('title', 'regex', '.*')])


class TestMemoryStoreWrites:

    def test_update_returns_changed_rows_and_keeps_id(self, filled_store):
        rows = filled_store.update('tasks', [eq('status', 'completed')],
                                   {'id': 'other', 'status': 'cancelled'})
        assert len(rows) == 1
        assert rows[0]['id'] != 'other'
        assert filled_store.count('tasks', [eq('status', 'cancelled')]) == 1

    def test_delete_returns_count(self, filled_store):
        assert filled_store.delete('tasks', [not_null('due_date')]) == 2
        assert filled_store.count('tasks') == 1

    def test_clear(self, filled_store):
        filled_store.clear()
        assert filled_store.count('tasks') == 0


class TestMemoryStoreColumnTypes:
    """Rows follow the model column types, as the database would store them."""

    def test_numeric_strings_are_converted(self):
        store = MemoryStore()
        row = store.insert('budget_allocation', [{'allocated_amount': '100'}])[0]
        assert row['allocated_amount'] == 100.0

        updated = store.update('budget_allocation', [eq('id', row['id'])],
                               {'utilized_amount': ' 25.5 '})
        assert updated[0]['utilized_amount'] == 25.5

    def test_integer_columns_stay_integers(self):
        store = MemoryStore()
        row = store.insert('media_articles', [{'views_count': '7'}])[0]
        assert row['views_count'] == 7
        assert isinstance(row['views_count'], int)

    def test_non_numbers_are_rejected(self):
        store = MemoryStore()
        with pytest.raises(ValueError, match='allocated_amount must be a number'):
            store.insert('budget_allocation', [{'allocated_amount': 'lots'}])
        with pytest.raises(ValueError):
            store.insert('budget_allocation', [{'allocated_amount': [100]}])
        assert store.count('budget_allocation') == 0

    def test_nulls_and_unmodelled_tables_pass_through(self):
        store = MemoryStore()
        assert store.insert('bills', [{'amount_paid': None}])[0]['amount_paid'] is None
        assert store.insert('scratch', [{'amount': 'n/a'}])[0]['amount'] == 'n/a'

    def test_ordering_mixed_types_raises_store_error(self):
        store = MemoryStore()
        store.insert('scratch', [{'rank': 1}, {'rank': 'first'}])
        with pytest.raises(StoreError):
            store.select('scratch', order_by='rank')

    def test_comparing_mixed_types_raises_store_error(self):
        store = MemoryStore()
        store.insert('scratch', [{'rank': 'first'}])
        with pytest.raises(StoreError):
            store.select('scratch', [gt('rank', 1)])


class TestCreateStore:

    def test_memory(self):
        assert isinstance(create_store('memory'), MemoryStore)

    def test_sqlalchemy(self):
        assert isinstance(create_store('sqlalchemy'), SQLAlchemyStore)

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            create_store('redis')

    def test_validate_filters_passes_known_ops(self):
        assert validate_filters([eq('a', 1)]) == [eq('a', 1)]


class TestSQLAlchemyStore:
    """The database store speaks the same row dialect as MemoryStore."""

    def test_insert_select_round_trip(self, app):
        with app.app_context():
            store = SQLAlchemyStore()
            created = store.insert('projects', [{
                'name': 'Menstrual Hygiene Awareness',
                'start_date': '2026-02-01',
                'metadata': {'pads_donated_current': 10},
            }])[0]

            rows = store.select('projects', [eq('id', created['id'])])
            assert rows[0]['name'] == 'Menstrual Hygiene Awareness'
            assert rows[0]['start_date'] == '2026-02-01'
            assert rows[0]['metadata'] == {'pads_donated_current': 10}
            assert rows[0]['status'] == 'planning'

    def test_filters_order_and_count(self, app):
        with app.app_context():
            store = SQLAlchemyStore()
            store.insert('tasks', [
                {'title': 'B', 'due_date': '2026-01-02', 'status': 'completed'},
                {'title': 'A', 'due_date': '2026-01-01', 'status': 'in_progress'},
                {'title': 'C', 'status': 'in_progress'},
            ])

            rows = store.select('tasks', [eq('status', 'in_progress')], order_by='title')
            assert [r['title'] for r in rows] == ['A', 'C']
            assert store.count('tasks', between('due_date', '2026-01-01', '2026-01-31')) == 2
            assert store.count('tasks', [search(['title'], 'b')]) == 1
            assert store.count('tasks', [is_null('due_date')]) == 1

    def test_update_and_delete(self, app):
        with app.app_context():
            store = SQLAlchemyStore()
            row = store.insert('bills', [{'total_amount': 500}])[0]

            updated = store.update('bills', [eq('id', row['id'])], {'status': 'paid'})
            assert updated[0]['status'] == 'paid'
            assert store.delete('bills', [eq('id', row['id'])]) == 1
            assert store.count('bills') == 0

    def test_numeric_strings_are_converted(self, app):
        with app.app_context():
            store = SQLAlchemyStore()
            row = store.insert('budget_allocation', [{'allocated_amount': '100'}])[0]
            assert row['allocated_amount'] == 100.0
            with pytest.raises(ValueError):
                store.insert('budget_allocation', [{'allocated_amount': 'lots'}])

    def test_unknown_table_and_column_raise_store_error(self, app):
        with app.app_context():
            store = SQLAlchemyStore()
            with pytest.raises(StoreError):
                store.select('expenses')
            with pytest.raises(StoreError):
                store.select('projects', [eq('no_such_column', 1)])

    def test_backend_failure_is_chained(self, app):
        """A database error surfaces as StoreError with the cause attached."""
        with app.app_context():
            store = SQLAlchemyStore()
            db.drop_all()
            with pytest.raises(StoreError) as excinfo:
                store.select('projects')
            assert excinfo.value.__cause__ is not None
            db.create_all()
