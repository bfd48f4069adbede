from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Sequence

from ..applications.repository import ApplicationRepository
from ..common.datetime_utils import now_local
from ..common.validators import optional_str, require_int, require_min_length
from ..core.actor import Actor
from ..core.constants import MIN_CERTIFICATE_TITLE_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError
from ..eligibility.gate import EligibilityGate
from ..posts.model import Post
from ..posts.repository import PostRepository
from .model import BulkIssueResult, Certificate
from .repository import CertificateRepository

logger = logging.getLogger(__name__)


class CertificateService:
    def __init__(
        self,
        certificates: CertificateRepository,
        applications: ApplicationRepository,
        posts: PostRepository,
        gate: EligibilityGate,
    ):
        self._certificates = certificates
        self._applications = applications
        self._posts = posts
        self._gate = gate

    def _owned_post(self, actor: Actor, post_id: Any) -> Post:
        if actor.role != Role.ORGANIZATION:
            raise AuthorizationError("Only organizations can issue certificates")
        post = self._posts.get_by_id(require_int(post_id, "postId"))
        if not post or post.author_id != actor.user_id:
            raise NotFoundError("Post not found or you don't own this post")
        return post

    def issue(
        self,
        actor: Actor,
        *,
        post_id: Any,
        volunteer_id: Any,
        title: Any,
        description: Any = None,
        certificate_url: Any = None,
        now: datetime | None = None,
    ) -> Certificate:
        now = now or now_local()
        title = require_min_length(title, "title", MIN_CERTIFICATE_TITLE_LENGTH)
        volunteer_id = require_int(volunteer_id, "volunteerId")
        post = self._owned_post(actor, post_id)

        application = self._applications.get_for_volunteer_and_post(volunteer_id=volunteer_id, post_id=post.post_id)
        self._gate.ensure_can_receive_certificate(application, now=now)

        certificate_id = self._certificates.create(
            volunteer_id=volunteer_id,
            post_id=post.post_id,
            organization_id=post.organization_id,
            title=title,
            description=optional_str(description),
            certificate_url=optional_str(certificate_url),
            issued_date=now,
        )
        logger.info("certificate %s issued to volunteer %s for post %s", certificate_id, volunteer_id, post.post_id)
        certificate = self._certificates.get_by_id(certificate_id)
        if not certificate:
            raise NotFoundError("Certificate not found")
        return certificate

    def bulk_issue(
        self,
        actor: Actor,
        *,
        post_id: Any,
        title: Any,
        description: Any = None,
        certificate_url: Any = None,
        now: datetime | None = None,
    ) -> BulkIssueResult:
        """Issue to every APPROVED + PRESENT volunteer of a post; ineligible ones are counted, not fatal."""
        now = now or now_local()
        title = require_min_length(title, "title", MIN_CERTIFICATE_TITLE_LENGTH)
        post = self._owned_post(actor, post_id)

        volunteer_ids = sorted(set(self._applications.list_eligible_volunteer_ids(post.post_id)))
        if not volunteer_ids:
            return BulkIssueResult()

        existing = self._certificates.volunteer_ids_with_certificate(post_id=post.post_id, volunteer_ids=volunteer_ids)
        remaining = [v for v in volunteer_ids if v not in existing]
        suspended = self._gate.suspended_among(remaining, now=now)

        created = 0
        skipped_existing = len(existing)
        for volunteer_id in remaining:
            if volunteer_id in suspended:
                continue
            # Each create commits on its own; a concurrent duplicate only skips that volunteer.
            try:
                self._certificates.create(
                    volunteer_id=volunteer_id,
                    post_id=post.post_id,
                    organization_id=post.organization_id,
                    title=title,
                    description=optional_str(description),
                    certificate_url=optional_str(certificate_url),
                    issued_date=now,
                )
            except ConflictError:
                skipped_existing += 1
                continue
            created += 1

        result = BulkIssueResult(created=created, skipped_existing=skipped_existing, skipped_penalty=len(suspended))
        logger.info(
            "bulk certificates for post %s: created=%s skipped_existing=%s skipped_penalty=%s",
            post.post_id,
            result.created,
            result.skipped_existing,
            result.skipped_penalty,
        )
        return result

    def list_for_actor(self, actor: Actor) -> Sequence[Certificate]:
        """Volunteers see their own, organizations the ones for their posts, admins all."""
        if actor.role == Role.VOLUNTEER:
            return self._certificates.list_for_volunteer(actor.user_id)
        if actor.role == Role.ORGANIZATION:
            return self._certificates.list_for_post_author(actor.user_id)
        return self._certificates.list_all()

