from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_str, parse_enum, require_int
from ..core.actor import Actor
from ..core.enums import ApplicationStatus, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError
from ..eligibility.gate import EligibilityGate
from ..posts.repository import PostRepository
from .model import Application
from .repository import ApplicationRepository

logger = logging.getLogger(__name__)


class ApplicationService:
    def __init__(self, applications: ApplicationRepository, posts: PostRepository, gate: EligibilityGate):
        self._applications = applications
        self._posts = posts
        self._gate = gate

    def get(self, application_id: int) -> Application:
        application = self._applications.get_by_id(int(application_id))
        if not application:
            raise NotFoundError("Application not found")
        return application

    def _require_post_author(self, actor: Actor, post_id: int) -> None:
        post = self._posts.get_by_id(int(post_id))
        if not post:
            raise NotFoundError("Post not found")
        if post.author_id != actor.user_id:
            logger.warning("user %s is not the author of post %s", actor.user_id, post_id)
            raise AuthorizationError("Forbidden")

    def apply(self, actor: Actor, *, post_id: Any, message: Any = None, now: datetime | None = None) -> Application:
        now = now or now_local()
        post_id = require_int(post_id, "postId")
        message = optional_str(message)

        if actor.role != Role.VOLUNTEER:
            raise AuthorizationError("Only volunteers can apply")
        if not self._posts.get_by_id(post_id):
            raise NotFoundError("Post not found")

        self._gate.ensure_can_apply(actor.user_id, now=now)

        if self._applications.get_for_volunteer_and_post(volunteer_id=actor.user_id, post_id=post_id):
            raise ConflictError("Already applied to this post")

        application_id = self._applications.create(
            volunteer_id=actor.user_id,
            post_id=post_id,
            message=message,
            created_at=now,
        )
        logger.info("volunteer %s applied to post %s (application %s)", actor.user_id, post_id, application_id)
        return self.get(application_id)

    def withdraw(self, actor: Actor, application_id: int) -> None:
        application = self.get(application_id)
        if application.volunteer_id != actor.user_id:
            raise AuthorizationError("Forbidden")
        self._applications.delete(application.application_id)
        logger.info("volunteer %s withdrew application %s", actor.user_id, application.application_id)

    def decide(self, actor: Actor, application_id: int, status: Any) -> Application:
        new_status = parse_enum(ApplicationStatus, status, "status")
        application = self.get(application_id)
        self._require_post_author(actor, application.post_id)

        self._applications.update_status(application_id=application.application_id, status=new_status)
        logger.info("application %s set to %s by user %s", application.application_id, new_status.value, actor.user_id)
        return self.get(application_id)

    def list_for_post(self, actor: Actor, post_id: int) -> Sequence[Application]:
        self._require_post_author(actor, post_id)
        return self._applications.list_for_post(int(post_id))
