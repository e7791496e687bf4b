"""Aggregation helpers for dashboard statistics.

All functions take an already-fetched list of rows and reduce it in a
single pass. Results are only as complete as the list passed in; nothing
here is pagination-aware.
"""
from typing import Any, Callable, Iterable, Optional, Sequence, Union

# Bucket for records whose grouping field is empty
UNSPECIFIED = 'unspecified'


def sum_field(records: Iterable[dict], field: str) -> float:
    """Sum a numeric field, treating missing or None values as 0."""
    return sum(record.get(field) or 0 for record in records)


def percentage(part: float, whole: float, ndigits: Optional[int] = None) -> float:
    """Return part/whole as a percentage, or 0 when whole is 0.

    Args:
        part: Numerator.
        whole: Denominator.
        ndigits: Round to this many digits; ``0`` rounds to a whole number.
    """
    if not whole:
        return 0
    value = (part / whole) * 100
    if ndigits is None:
        return value
    return round(value, ndigits) if ndigits else round(value)


def count_by(records: Iterable[dict], field: str,
             keys: Sequence[Any] = ()) -> dict:
    """Count records per value of a field.

    Every key in ``keys`` appears in the result even with a zero count.
    Values outside ``keys`` get their own bucket and missing values are
    counted under UNSPECIFIED, so bucket counts always sum to ``total``.

    Returns:
        Dict with 'total' plus one entry per bucket.
    """
    counts = {key: 0 for key in keys}
    total = 0
    for record in records:
        value = record.get(field)
        if value is None:
            value = UNSPECIFIED
        counts[value] = counts.get(value, 0) + 1
        total += 1
    return {'total': total, **counts}


def count_where(records: Iterable[dict], predicate: Callable[[dict], bool]) -> int:
    """Count records for which predicate is true."""
    return sum(1 for record in records if predicate(record))


def distinct_count(records: Iterable[dict], field: str) -> int:
    """Number of distinct values of a field (None counts as a value)."""
    return len({record.get(field) for record in records})


def group_totals(
    records: Iterable[dict],
    label: Union[str, Callable[[dict], Any]],
    sum_fields: Sequence[str],
    default_label: str = 'Uncategorized',
) -> dict[str, dict]:
    """Roll records up by display label.

    Records sharing a label are merged. Groups keep first-seen order.

    Args:
        records: Rows to group.
        label: Field name holding the label, or a callable returning it.
        sum_fields: Numeric fields to total per group.
        default_label: Label used when the record's label is empty.

    Returns:
        Mapping label -> {'first_id', 'count', 'project_ids', <sum_field>...}.
    """
    groups: dict[str, dict] = {}
    for record in records:
        key = label(record) if callable(label) else record.get(label)
        key = key or default_label
        group = groups.get(key)
        if group is None:
            group = {'first_id': record.get('id'), 'count': 0, 'project_ids': set()}
            group.update({field: 0 for field in sum_fields})
            groups[key] = group
        group['count'] += 1
        group['project_ids'].add(record.get('project_id'))
        for field in sum_fields:
            group[field] += record.get(field) or 0
    return groups


def summarize_allocations(allocations: Sequence[dict]) -> dict:
    """Budget totals over a list of allocation-like rows.

    Returns:
        Dictionary with:
            - total_allocated, total_utilized, total_pending, total_available
            - total_remaining: allocated minus utilized
            - utilization_rate: utilized / allocated as a percentage (0 when
              nothing is allocated)
            - budget_heads: distinct category names
            - total_projects: distinct project ids
    """
    total_allocated = sum_field(allocations, 'allocated_amount')
    total_utilized = sum_field(allocations, 'utilized_amount')
    return {
        'total_allocated': total_allocated,
        'total_utilized': total_utilized,
        'total_remaining': total_allocated - total_utilized,
        'total_pending': sum_field(allocations, 'pending_amount'),
        'total_available': sum_field(allocations, 'available_amount'),
        'utilization_rate': percentage(total_utilized, total_allocated),
        'budget_heads': distinct_count(allocations, 'category_name'),
        'total_projects': distinct_count(allocations, 'project_id'),
    }
