from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from .model import Certificate


class CertificateRepository(Protocol):
    def get_for_volunteer_and_post(self, *, volunteer_id: int, post_id: int) -> Optional[Certificate]:
        raise NotImplementedError

    def volunteer_ids_with_certificate(self, *, post_id: int, volunteer_ids: Iterable[int]) -> set[int]:
        raise NotImplementedError

    def create(
        self,
        *,
        volunteer_id: int,
        post_id: int,
        organization_id: Optional[int],
        title: str,
        description: Optional[str],
        certificate_url: Optional[str],
        issued_date: datetime,
    ) -> int:
        """Raises ConflictError when the (volunteer, post) pair already has a certificate."""

        raise NotImplementedError

    def get_by_id(self, certificate_id: int) -> Optional[Certificate]:
        raise NotImplementedError

    def list_for_volunteer(self, volunteer_id: int) -> Sequence[Certificate]:
        raise NotImplementedError

    def list_for_post_author(self, author_id: int) -> Sequence[Certificate]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Certificate]:
        raise NotImplementedError
