"""Utilization certificate service.

Certificates attest how much of a partner's allocated budget a project
spent. After approval they are sent to the partner, who acknowledges
receipt.
"""
import secrets
import string
import time
from typing import Optional

from app.models import CertificateStatus, CertificateType
from app.services.aggregation import count_by
from app.services.repository import ErrorPolicy, Repository, check_choice, today_iso
from app.store import TableStore, eq

BASE36_DIGITS = string.digits + string.ascii_uppercase


def to_base36(number: int) -> str:
    """Render a non-negative integer in upper-case base 36."""
    if number == 0:
        return '0'
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_DIGITS[remainder])
    return ''.join(reversed(digits))


class CertificateService:
    """CRUD, status workflow and statistics for utilization certificates.

    Reads and status operations swallow store failures (empty/False
    results). Creating and updating a certificate re-raise them so the
    caller sees why the save failed.
    """

    def __init__(self, store: TableStore, policy: str = ErrorPolicy.DEFAULT,
                 write_policy: str = ErrorPolicy.RAISE):
        self.repo = Repository(
            store, 'utilization_certificates', policy=policy, label='certificates',
        )
        self.write_policy = write_policy

    def list_certificates(self) -> list[dict]:
        return self.repo.find()

    def get_certificates_by_project(self, project_id: str) -> list[dict]:
        return self.repo.find([eq('project_id', project_id)])

    def get_certificates_by_partner(self, partner_id: str) -> list[dict]:
        return self.repo.find([eq('csr_partner_id', partner_id)])

    def get_certificate(self, id: str) -> Optional[dict]:
        return self.repo.get(id)

    def create_certificate(self, data: dict) -> Optional[dict]:
        """Create a certificate.

        Status defaults to draft and a certificate code is generated when
        none is given.

        Raises:
            ValueError: If status or certificate_type is invalid.
            StoreError: If the store rejects the insert.
        """
        payload = dict(data)
        payload.setdefault('status', CertificateStatus.DRAFT)
        check_choice(payload['status'], CertificateStatus.ALL)
        if 'certificate_type' in payload:
            check_choice(payload['certificate_type'], CertificateType.ALL,
                         field='certificate_type')
        if not payload.get('certificate_code'):
            payload['certificate_code'] = self.generate_certificate_code()
        payload.setdefault('sent_to_partner', False)
        payload.setdefault('acknowledged', False)
        return self.repo.create(payload, policy=self.write_policy)

    def update_certificate(self, id: str, data: dict) -> Optional[dict]:
        """Apply a partial update.

        Raises:
            ValueError: If a given status or certificate_type is invalid.
            StoreError: If the store rejects the update.
        """
        if 'status' in data:
            check_choice(data['status'], CertificateStatus.ALL)
        if 'certificate_type' in data:
            check_choice(data['certificate_type'], CertificateType.ALL,
                         field='certificate_type')
        return self.repo.update(id, data, policy=self.write_policy)

    def delete_certificate(self, id: str) -> bool:
        return self.repo.delete(id)

    def update_status(self, id: str, status: str, user_id: Optional[str] = None) -> bool:
        """Set status; approving with a user records approved_by.

        Returns:
            True if the certificate exists and was updated.
        """
        check_choice(status, CertificateStatus.ALL)
        changes = {'status': status}
        if status == CertificateStatus.APPROVED and user_id:
            changes['approved_by'] = user_id
        return self.repo.update(id, changes) is not None

    def mark_sent_to_partner(self, id: str) -> bool:
        return self.repo.update(id, {
            'sent_to_partner': True,
            'sent_date': today_iso(),
        }) is not None

    def mark_acknowledged(self, id: str) -> bool:
        return self.repo.update(id, {
            'acknowledged': True,
            'acknowledgment_date': today_iso(),
        }) is not None

    def get_certificate_stats(self, certificates: list[dict] = None) -> dict:
        """Count certificates per status."""
        if certificates is None:
            certificates = self.repo.find(columns=['status'])
        return count_by(certificates, 'status', CertificateStatus.ALL)

    @staticmethod
    def generate_certificate_code() -> str:
        """Return a code like ``UC-LZ3K9Q1A-7F2B``.

        The middle part is the current time in milliseconds in base 36;
        the suffix is four random base-36 characters.
        """
        timestamp = to_base36(int(time.time() * 1000))
        suffix = ''.join(secrets.choice(BASE36_DIGITS) for _ in range(4))
        return f'UC-{timestamp}-{suffix}'
