"""Bill service: vendor invoices, receipts and estimates charged to projects."""
from typing import Optional

from app.models import BillStatus, BillType
from app.services.aggregation import count_by, sum_field
from app.services.repository import ErrorPolicy, Repository, check_choice
from app.store import TableStore, between, eq


class BillService:
    """CRUD, status transitions and totals for bills.

    Bills are listed newest bill date first.
    """

    def __init__(self, store: TableStore, policy: str = ErrorPolicy.RAISE):
        self.repo = Repository(store, 'bills', order_by='date', policy=policy, label='bills')

    def list_bills(self, status: Optional[str] = None) -> list[dict]:
        filters = [eq('status', status)] if status else []
        return self.repo.find(filters)

    def get_bill(self, id: str) -> Optional[dict]:
        return self.repo.get(id)

    def get_bills_by_project(self, project_id: str) -> list[dict]:
        return self.repo.find([eq('project_id', project_id)])

    def get_bills_by_date_range(self, start_date: str, end_date: str) -> list[dict]:
        """Bills dated within [start_date, end_date]."""
        return self.repo.find(between('date', start_date, end_date))

    def get_bills_by_vendor(self, vendor_name: str) -> list[dict]:
        return self.repo.find([eq('vendor_name', vendor_name)])

    def create_bill(self, data: dict) -> Optional[dict]:
        """Create a bill.

        Status defaults to pending.

        Raises:
            ValueError: If status or bill_type is not a valid value.
        """
        payload = dict(data)
        payload.setdefault('status', BillStatus.PENDING)
        check_choice(payload['status'], BillStatus.ALL)
        if 'bill_type' in payload:
            check_choice(payload['bill_type'], BillType.ALL, field='bill_type')
        return self.repo.create(payload)

    def update_bill(self, id: str, data: dict) -> Optional[dict]:
        if 'status' in data:
            check_choice(data['status'], BillStatus.ALL)
        if 'bill_type' in data:
            check_choice(data['bill_type'], BillType.ALL, field='bill_type')
        return self.repo.update(id, data)

    def update_bill_status(self, id: str, status: str,
                           user_id: Optional[str] = None) -> Optional[dict]:
        """Move a bill to a new status.

        Args:
            id: Bill id.
            status: pending, approved or paid.
            user_id: Acting user. Recorded as approved_by when approving
                and as paid_by when paying; paying also settles
                amount_paid to the bill's total_amount.

        Returns:
            The updated bill, or None if it does not exist.

        Raises:
            ValueError: If status is invalid.
        """
        check_choice(status, BillStatus.ALL)
        changes = {'status': status}

        if status == BillStatus.APPROVED and user_id:
            changes['approved_by'] = user_id
        if status == BillStatus.PAID and user_id:
            bill = self.get_bill(id)
            if bill is None:
                return None
            changes['paid_by'] = user_id
            changes['amount_paid'] = bill.get('total_amount') or 0

        return self.repo.update(id, changes)

    def delete_bill(self, id: str) -> bool:
        return self.repo.delete(id)

    def get_bill_stats(self, bills: list[dict] = None) -> dict:
        """Count bills per status and total billed/paid amounts."""
        if bills is None:
            bills = self.list_bills()
        stats = count_by(bills, 'status', BillStatus.ALL)
        stats['total_amount'] = sum_field(bills, 'total_amount')
        stats['paid_amount'] = sum_field(bills, 'amount_paid')
        return stats
