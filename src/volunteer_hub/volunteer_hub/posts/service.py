from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import optional_str, parse_enum, require_min_length
from ..core.actor import Actor
from ..core.constants import MIN_POST_DESCRIPTION_LENGTH, MIN_POST_TITLE_LENGTH, POST_LIST_LIMIT
from ..core.enums import PostStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Post
from .repository import PostRepository

logger = logging.getLogger(__name__)

POST_CATEGORIES = frozenset(
    {"ENVIRONMENT", "EDUCATION", "HEALTHCARE", "COMMUNITY", "ANIMALS", "ARTS", "SPORTS", "TECHNOLOGY", "OTHER"}
)

# Statuses an organization may set on its own post; publishing goes through admin approval.
AUTHOR_STATUSES = frozenset({PostStatus.DRAFT, PostStatus.PENDING_APPROVAL})


@dataclass(frozen=True)
class _PostFields:
    title: str
    category: str
    description: Optional[str]
    location: Optional[str]
    start_date: Optional[datetime]
    end_date: Optional[datetime]


def _validate_fields(
    *,
    title: Any,
    category: Any,
    description: Any,
    location: Any,
    start_date: Any,
    end_date: Any,
) -> _PostFields:
    title = require_min_length(title, "title", MIN_POST_TITLE_LENGTH)
    if category not in POST_CATEGORIES:
        raise ValidationError("Invalid category", field="category")
    if description is not None:
        description = require_min_length(description, "description", MIN_POST_DESCRIPTION_LENGTH)

    starts = parse_iso_datetime(start_date, "startDate") if start_date else None
    ends = parse_iso_datetime(end_date, "endDate") if end_date else None
    if starts and ends and ends <= starts:
        raise ValidationError("End date must be after start date", field="endDate")

    return _PostFields(
        title=title,
        category=str(category),
        description=description,
        location=optional_str(location),
        start_date=starts,
        end_date=ends,
    )


class PostService:
    def __init__(self, posts: PostRepository):
        self._posts = posts

    def get(self, post_id: int) -> Post:
        post = self._posts.get_by_id(int(post_id))
        if not post:
            raise NotFoundError("Post not found")
        return post

    def _get_authored(self, actor: Actor, post_id: int) -> Post:
        post = self.get(post_id)
        if post.author_id != actor.user_id:
            logger.warning("user %s tried to change post %s they do not own", actor.user_id, post.post_id)
            raise AuthorizationError("Forbidden")
        return post

    def list_published(self, *, category: Any = None, search: Any = None) -> Sequence[Post]:
        """Public listing: newest published posts, optionally narrowed by category and text search."""
        if category and category not in POST_CATEGORIES:
            raise ValidationError("Invalid category", field="category")
        return self._posts.list_posts(
            status=PostStatus.PUBLISHED,
            category=category or None,
            search=optional_str(search),
            limit=POST_LIST_LIMIT,
        )

    def create(
        self,
        actor: Actor,
        *,
        title: Any,
        category: Any = "OTHER",
        description: Any = None,
        location: Any = None,
        start_date: Any = None,
        end_date: Any = None,
    ) -> Post:
        if actor.role == Role.VOLUNTEER:
            raise AuthorizationError("Only organizations can create posts")

        data = _validate_fields(
            title=title,
            category=category,
            description=description,
            location=location,
            start_date=start_date,
            end_date=end_date,
        )

        # Organization posts wait for admin approval; admin posts go live directly.
        organization_id: Optional[int] = None
        status = PostStatus.PUBLISHED
        if actor.role == Role.ORGANIZATION:
            organization_id = self._posts.get_organization_id_for_user(actor.user_id)
            status = PostStatus.PENDING_APPROVAL

        post_id = self._posts.create_post(
            author_id=actor.user_id,
            organization_id=organization_id,
            title=data.title,
            category=data.category,
            status=status,
            location=data.location,
            start_date=data.start_date,
            end_date=data.end_date,
            description=data.description,
        )
        logger.info("post %s created by user %s (%s)", post_id, actor.user_id, status.value)
        return self.get(post_id)

    def update(
        self,
        actor: Actor,
        post_id: int,
        *,
        title: Any,
        category: Any = "OTHER",
        description: Any = None,
        location: Any = None,
        start_date: Any = None,
        end_date: Any = None,
        status: Any = None,
    ) -> Post:
        """Replace the post's fields; only its author may do this. Without ``status`` the current one is kept."""
        post = self._get_authored(actor, post_id)
        data = _validate_fields(
            title=title,
            category=category,
            description=description,
            location=location,
            start_date=start_date,
            end_date=end_date,
        )

        new_status = post.status
        if status is not None:
            new_status = parse_enum(PostStatus, status, "status")
            if actor.role != Role.ADMIN and new_status != post.status and new_status not in AUTHOR_STATUSES:
                raise ValidationError("status must be one of: DRAFT, PENDING_APPROVAL", field="status")

        self._posts.update_post(
            post_id=post.post_id,
            title=data.title,
            category=data.category,
            status=new_status,
            location=data.location,
            start_date=data.start_date,
            end_date=data.end_date,
            description=data.description,
        )
        logger.info("post %s updated by user %s", post.post_id, actor.user_id)
        return self.get(post.post_id)

    def delete(self, actor: Actor, post_id: int) -> None:
        post = self.get(post_id)
        if post.author_id != actor.user_id and actor.role != Role.ADMIN:
            raise AuthorizationError("Forbidden")
        self._posts.delete_post(post.post_id)
        logger.info("post %s deleted by user %s", post.post_id, actor.user_id)

    def publish(self, actor: Actor, post_id: int) -> Post:
        """Author releases a post: admins publish directly, organizations submit it for approval."""
        post = self._get_authored(actor, post_id)
        if post.status == PostStatus.PUBLISHED:
            return post
        status = PostStatus.PUBLISHED if actor.role == Role.ADMIN else PostStatus.PENDING_APPROVAL
        self._posts.set_status(post_id=post.post_id, status=status)
        logger.info("post %s released by user %s (%s)", post.post_id, actor.user_id, status.value)
        return self.get(post.post_id)

    def flag(self, actor: Actor, post_id: int) -> Post:
        """Report a published post; it leaves the public listing until an admin moderates it."""
        post = self.get(post_id)
        if post.status != PostStatus.PUBLISHED:
            raise ValidationError("Only published posts can be flagged")
        self._posts.set_status(post_id=post.post_id, status=PostStatus.FLAGGED)
        logger.info("post %s flagged by user %s", post.post_id, actor.user_id)
        return self.get(post.post_id)

    def approve(self, actor: Actor, post_id: int) -> Post:
        if actor.role != Role.ADMIN:
            raise AuthorizationError("Forbidden")
        post = self.get(post_id)
        self._posts.set_status(post_id=post.post_id, status=PostStatus.PUBLISHED)
        return self.get(post_id)
