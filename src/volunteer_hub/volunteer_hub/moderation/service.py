"""Admin moderation: flagged-post queue, approve/delete decisions and platform counters."""
from __future__ import annotations

import logging
from typing import Any, Sequence

from ..applications.repository import ApplicationRepository
from ..core.actor import Actor
from ..core.enums import PostStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..posts.model import Post
from ..posts.repository import PostRepository
from ..users.repository import UserRepository
from .model import ModerationAction, PlatformStats

logger = logging.getLogger(__name__)


class ModerationService:
    def __init__(self, posts: PostRepository, users: UserRepository, applications: ApplicationRepository):
        self._posts = posts
        self._users = users
        self._applications = applications

    @staticmethod
    def _require_admin(actor: Actor) -> None:
        if actor.role != Role.ADMIN:
            raise AuthorizationError("Forbidden")

    def flagged_posts(self, actor: Actor) -> Sequence[Post]:
        self._require_admin(actor)
        return self._posts.list_posts(status=PostStatus.FLAGGED)

    def moderate(self, actor: Actor, post_id: int, action: Any) -> None:
        """``approve`` publishes the post again; ``delete`` removes it."""
        self._require_admin(actor)
        try:
            decision = ModerationAction(action)
        except ValueError:
            raise ValidationError("Invalid action", field="action")

        post = self._posts.get_by_id(int(post_id))
        if not post:
            raise NotFoundError("Post not found")

        if decision == ModerationAction.APPROVE:
            self._posts.set_status(post_id=post.post_id, status=PostStatus.PUBLISHED)
        else:
            self._posts.delete_post(post.post_id)
        logger.info("admin %s moderated post %s: %s", actor.user_id, post.post_id, decision.value)

    def stats(self, actor: Actor) -> PlatformStats:
        self._require_admin(actor)
        return PlatformStats(
            total_users=self._users.count_all(),
            total_posts=self._posts.count_all(),
            total_applications=self._applications.count_all(),
            flagged_posts=self._posts.count_by_status(PostStatus.FLAGGED),
        )
