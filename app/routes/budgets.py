"""Budget routes: allocations, utilizations and categories."""
from flask import Blueprint, jsonify, request

from app.routes.helpers import done_response, item_response, json_body, list_response
from app.services import get_services

budgets_bp = Blueprint('budgets', __name__)


def _required_amount() -> float:
    """Read the ``amount`` query parameter.

    Raises:
        ValueError: If it is missing or not a number.
    """
    try:
        return float(request.args['amount'])
    except (KeyError, ValueError):
        raise ValueError('amount query parameter must be a number') from None


# ============================================================================
# Allocations
# ============================================================================

@budgets_bp.route('/budget/allocations', methods=['GET'])
def get_allocations():
    """Get budget allocations.

    Query Parameters (at most one filter is applied, in this order):
        project_id, category, fiscal_year (+ quarter), month
    """
    service = get_services().allocations
    args = request.args
    if args.get('project_id'):
        rows = service.get_allocations_by_project(args['project_id'])
    elif args.get('category'):
        rows = service.get_allocations_by_category(args['category'])
    elif args.get('fiscal_year') and args.get('quarter'):
        rows = service.get_allocations_by_quarter(args['fiscal_year'], args['quarter'])
    elif args.get('fiscal_year'):
        rows = service.get_allocations_by_fiscal_year(args['fiscal_year'])
    elif args.get('month'):
        rows = service.get_allocations_by_month(args['month'])
    else:
        rows = service.list_allocations()
    return list_response(rows)


@budgets_bp.route('/budget/allocations/heads', methods=['GET'])
def get_budget_heads():
    return list_response(get_services().allocations.get_budget_heads())


@budgets_bp.route('/budget/allocations/stats', methods=['GET'])
def allocation_stats():
    return jsonify({'data': get_services().allocations.get_budget_stats()})


@budgets_bp.route('/budget/allocations/availability/<category_id>', methods=['GET'])
def allocation_availability(category_id: str):
    available = get_services().allocations.check_budget_availability(
        category_id, _required_amount(),
    )
    return jsonify({'data': {'available': available}})


@budgets_bp.route('/budget/allocations/<id>', methods=['GET'])
def get_allocation(id: str):
    return item_response(get_services().allocations.get_allocation(id), 'Allocation')


@budgets_bp.route('/budget/allocations', methods=['POST'])
def create_allocation():
    return item_response(
        get_services().allocations.create_allocation(json_body()), 'Allocation', 201,
    )


@budgets_bp.route('/budget/allocations/<id>', methods=['PUT'])
def update_allocation(id: str):
    return item_response(
        get_services().allocations.update_allocation(id, json_body()), 'Allocation',
    )


@budgets_bp.route('/budget/allocations/<id>', methods=['DELETE'])
def delete_allocation(id: str):
    deleted = get_services().allocations.delete_allocation(id)
    return done_response(deleted, 'Allocation', 'Allocation deleted successfully')


# ============================================================================
# Utilizations
# ============================================================================

@budgets_bp.route('/budget/utilizations', methods=['GET'])
def get_utilizations():
    """Query Parameters: project_id, or fiscal_year (+ quarter)."""
    service = get_services().utilizations
    args = request.args
    if args.get('project_id'):
        rows = service.get_utilizations_by_project(args['project_id'])
    elif args.get('fiscal_year') and args.get('quarter'):
        rows = service.get_utilizations_by_quarter(args['fiscal_year'], args['quarter'])
    elif args.get('fiscal_year'):
        rows = service.get_utilizations_by_fiscal_year(args['fiscal_year'])
    else:
        rows = service.list_utilizations()
    return list_response(rows)


@budgets_bp.route('/budget/utilizations/stats', methods=['GET'])
def utilization_stats():
    stats = get_services().utilizations.get_utilization_stats(request.args.get('fiscal_year'))
    return jsonify({'data': stats})


@budgets_bp.route('/budget/utilizations/years/<fiscal_year>/heads', methods=['GET'])
def utilization_heads(fiscal_year: str):
    return list_response(get_services().utilizations.get_budget_heads_by_year(fiscal_year))


@budgets_bp.route('/budget/utilizations/years/<fiscal_year>/status', methods=['GET'])
def utilization_status(fiscal_year: str):
    return jsonify({'data': get_services().utilizations.get_utilization_status(fiscal_year)})


@budgets_bp.route('/budget/utilizations/availability/<partner_id>', methods=['GET'])
def utilization_availability(partner_id: str):
    available = get_services().utilizations.check_budget_availability(
        partner_id, _required_amount(),
    )
    return jsonify({'data': {'available': available}})


@budgets_bp.route('/budget/utilizations/<id>', methods=['GET'])
def get_utilization(id: str):
    return item_response(get_services().utilizations.get_utilization(id), 'Utilization')


@budgets_bp.route('/budget/utilizations', methods=['POST'])
def create_utilization():
    row = get_services().utilizations.create_utilization(json_body())
    if row is None:
        return jsonify({'error': 'Utilization could not be created'}), 502
    return jsonify({'data': row}), 201


@budgets_bp.route('/budget/utilizations/<id>', methods=['PUT'])
def update_utilization(id: str):
    return item_response(
        get_services().utilizations.update_utilization(id, json_body()), 'Utilization',
    )


@budgets_bp.route('/budget/utilizations/<id>', methods=['DELETE'])
def delete_utilization(id: str):
    deleted = get_services().utilizations.delete_utilization(id)
    return done_response(deleted, 'Utilization', 'Utilization deleted successfully')


# ============================================================================
# Categories
# ============================================================================

@budgets_bp.route('/projects/<project_id>/budget-categories', methods=['GET'])
def get_project_categories(project_id: str):
    """Flat list, or the nested hierarchy with ``?tree=true``."""
    service = get_services().categories
    if request.args.get('tree', '').lower() in ('true', '1', 'yes'):
        return list_response(service.get_category_tree(project_id))
    return list_response(service.get_categories_by_project(project_id))


@budgets_bp.route('/projects/<project_id>/budget-categories', methods=['POST'])
def create_project_categories(project_id: str):
    """Create one category, or several when the body has a ``categories`` list.

    Batch requests are rejected with 400 when root categories would
    allocate more than the project's total budget.
    """
    services = get_services()
    data = json_body()

    if isinstance(data.get('categories'), list):
        if not all(isinstance(cat, dict) for cat in data['categories']):
            raise ValueError('Each category must be a JSON object')
        categories =[{**cat, 'project_id': project_id} for cat in data['categories']]
        project = services.projects.get_project(project_id)
        if project is not None:
            check = services.categories.validate_budget_allocation(
                categories, project.get('total_budget') or 0,
            )
            if not check['is_valid']:
                raise ValueError(check['error'])
        return list_response(services.categories.create_categories(categories)), 201

    category = services.categories.create_category({**data, 'project_id': project_id})
    return item_response(category, 'Category', 201)


@budgets_bp.route('/budget-categories/<id>', methods=['PUT'])
def update_category(id: str):
    return item_response(get_services().categories.update_category(id, json_body()), 'Category')


@budgets_bp.route('/budget-categories/<id>', methods=['DELETE'])
def delete_category(id: str):
    deleted = get_services().categories.delete_category(id)
    return done_response(deleted, 'Category', 'Category deleted successfully')
