from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional

from werkzeug.security import generate_password_hash

from src.volunteer_hub.volunteer_hub.applications.model import Application, AttendanceEntry
from src.volunteer_hub.volunteer_hub.certificates.model import Certificate
from src.volunteer_hub.volunteer_hub.container import Container, assemble
from src.volunteer_hub.volunteer_hub.core.actor import Actor
from src.volunteer_hub.volunteer_hub.core.enums import (
    ApplicationStatus,
    AttendanceStatus,
    PenaltyStatus,
    PenaltyType,
    PostStatus,
    Role,
)
from src.volunteer_hub.volunteer_hub.core.exceptions import ConflictError
from src.volunteer_hub.volunteer_hub.penalties.model import Penalty
from src.volunteer_hub.volunteer_hub.posts.model import Post
from src.volunteer_hub.volunteer_hub.users.model import User


class InMemoryUsers:
    def __init__(self):
        self.users: dict[int, User] = {}
        self.organizations: dict[int, int] = {}
        self.organization_names: dict[int, str] = {}
        self._id = 0

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.email == email), None)

    def create_user(self, *, name: str, email: str, password_hash: str, role: Role) -> int:
        if self.get_by_email(email):
            raise ConflictError("User already exists")
        self._id += 1
        self.users[self._id] = User(user_id=self._id, name=name, email=email, password_hash=password_hash, role=role)
        return self._id

    def create_organization(self, *, user_id: int, name: str) -> int:
        org_id = 100 + user_id
        self.organizations[user_id] = org_id
        self.organization_names[user_id] = name
        return org_id

    def get_organization_name(self, user_id: int) -> Optional[str]:
        return self.organization_names.get(user_id)

    def update_profile(self, *, user_id: int, name, bio, location, skills) -> bool:
        if user_id not in self.users:
            return False
        self.users[user_id] = replace(self.users[user_id], name=name, bio=bio, location=location, skills=tuple(skills))
        return True

    def list_by_role(self, role: Role):
        return sorted((u for u in self.users.values() if u.role == role), key=lambda u: u.user_id, reverse=True)

    def count_all(self) -> int:
        return len(self.users)


class InMemoryPosts:
    def __init__(self, users: InMemoryUsers):
        self._users = users
        self.posts: dict[int, Post] = {}
        self._id = 0

    def get_by_id(self, post_id: int) -> Optional[Post]:
        return self.posts.get(post_id)

    def get_organization_id_for_user(self, user_id: int) -> Optional[int]:
        return self._users.organizations.get(user_id)

    def create_post(
        self,
        *,
        author_id,
        organization_id,
        title,
        category,
        status,
        location=None,
        start_date=None,
        end_date=None,
        description=None,
    ) -> int:
        self._id += 1
        self.posts[self._id] = Post(
            post_id=self._id,
            author_id=author_id,
            organization_id=organization_id,
            title=title,
            category=category,
            status=status,
            location=location,
            start_date=start_date,
            end_date=end_date,
            description=description,
            author_name=self._users.get_by_id(author_id).name,
        )
        return self._id

    def set_status(self, *, post_id: int, status: PostStatus) -> bool:
        if post_id not in self.posts:
            return False
        self.posts[post_id] = replace(self.posts[post_id], status=status)
        return True

    def update_post(self, *, post_id: int, **fields) -> bool:
        if post_id not in self.posts:
            return False
        self.posts[post_id] = replace(self.posts[post_id], **fields)
        return True

    def delete_post(self, post_id: int) -> bool:
        return self.posts.pop(post_id, None) is not None

    def list_posts(self, *, status: PostStatus, category=None, search=None, limit=None):
        needle = search.lower() if search else None
        items = [
            p
            for p in self.posts.values()
            if p.status == status
            and (category is None or p.category == category)
            and (needle is None or needle in p.title.lower() or needle in (p.description or "").lower())
        ]
        items.sort(key=lambda p: p.post_id, reverse=True)
        return items[:limit] if limit else items

    def count_all(self) -> int:
        return len(self.posts)

    def count_by_status(self, status: PostStatus) -> int:
        return sum(1 for p in self.posts.values() if p.status == status)


class InMemoryApplications:
    def __init__(self, users: InMemoryUsers, posts: InMemoryPosts):
        self._users = users
        self._posts = posts
        self.applications: dict[int, Application] = {}
        self._id = 0

    def get_by_id(self, application_id: int) -> Optional[Application]:
        return self.applications.get(application_id)

    def get_for_volunteer_and_post(self, *, volunteer_id: int, post_id: int) -> Optional[Application]:
        return next(
            (a for a in self.applications.values() if a.volunteer_id == volunteer_id and a.post_id == post_id),
            None,
        )

    def create(self, *, volunteer_id: int, post_id: int, message: Optional[str], created_at: datetime) -> int:
        if self.get_for_volunteer_and_post(volunteer_id=volunteer_id, post_id=post_id):
            raise ConflictError("Already applied to this post")
        self._id += 1
        self.applications[self._id] = Application(
            application_id=self._id,
            volunteer_id=volunteer_id,
            post_id=post_id,
            status=ApplicationStatus.PENDING,
            message=message,
            created_at=created_at,
        )
        return self._id

    def delete(self, application_id: int) -> bool:
        return self.applications.pop(application_id, None) is not None

    def update_status(self, *, application_id: int, status: ApplicationStatus) -> bool:
        if application_id not in self.applications:
            return False
        self.applications[application_id] = replace(self.applications[application_id], status=status)
        return True

    def update_attendance(self, *, application_id: int, attendance_status: AttendanceStatus, marked_at) -> bool:
        if application_id not in self.applications:
            return False
        self.applications[application_id] = replace(
            self.applications[application_id],
            attendance_status=attendance_status,
            attendance_marked_at=marked_at,
        )
        return True

    def count_absences_between(self, *, volunteer_id: int, start: datetime, end: datetime) -> int:
        return sum(
            1
            for a in self.applications.values()
            if a.volunteer_id == volunteer_id
            and a.attendance_status == AttendanceStatus.ABSENT
            and a.attendance_marked_at is not None
            and start <= a.attendance_marked_at <= end
        )

    def list_for_post(self, post_id: int):
        return [a for a in self.applications.values() if a.post_id == post_id]

    def list_eligible_volunteer_ids(self, post_id: int):
        return [
            a.volunteer_id
            for a in self.applications.values()
            if a.post_id == post_id
            and a.status == ApplicationStatus.APPROVED
            and a.attendance_status == AttendanceStatus.PRESENT
        ]

    def list_marked_entries(self):
        entries = []
        for a in self.applications.values():
            if a.attendance_status == AttendanceStatus.NOT_MARKED:
                continue
            user = self._users.get_by_id(a.volunteer_id)
            post = self._posts.get_by_id(a.post_id)
            entries.append(
                AttendanceEntry(
                    application_id=a.application_id,
                    volunteer_id=a.volunteer_id,
                    volunteer_name=user.name,
                    volunteer_email=user.email,
                    post_id=a.post_id,
                    post_title=post.title,
                    post_category=post.category,
                    post_start_date=post.start_date,
                    organization_name=None,
                    attendance_status=a.attendance_status,
                    attendance_marked_at=a.attendance_marked_at,
                )
            )
        entries.sort(key=lambda e: e.attendance_marked_at, reverse=True)
        return entries

    def count_all(self) -> int:
        return len(self.applications)


class InMemoryPenalties:
    def __init__(self):
        self.penalties: dict[int, Penalty] = {}
        self._id = 0

    def create(self, *, user_id, type, reason, created_at, description=None, expires_at=None, issued_by=None) -> int:
        self._id += 1
        self.penalties[self._id] = Penalty(
            penalty_id=self._id,
            user_id=user_id,
            type=type,
            status=PenaltyStatus.ACTIVE,
            reason=reason,
            created_at=created_at,
            description=description,
            expires_at=expires_at,
            issued_by=issued_by,
        )
        return self._id

    def get_by_id(self, penalty_id: int) -> Optional[Penalty]:
        return self.penalties.get(penalty_id)

    def list_for_user(self, user_id: int):
        items = [p for p in self.penalties.values() if p.user_id == user_id]
        items.sort(key=lambda p: (p.created_at, p.penalty_id), reverse=True)
        return items

    def list_all(self):
        return sorted(self.penalties.values(), key=lambda p: (p.created_at, p.penalty_id), reverse=True)

    def list_active_for_users(self, user_ids: Iterable[int]):
        ids = set(user_ids)
        return [p for p in self.penalties.values() if p.user_id in ids and p.status == PenaltyStatus.ACTIVE]

    def update_status(self, *, penalty_id: int, status: PenaltyStatus, resolved_at=None) -> bool:
        if penalty_id not in self.penalties:
            return False
        self.penalties[penalty_id] = replace(self.penalties[penalty_id], status=status, resolved_at=resolved_at)
        return True

    def delete(self, penalty_id: int) -> bool:
        return self.penalties.pop(penalty_id, None) is not None

    def of_type(self, user_id: int, penalty_type: PenaltyType) -> list[Penalty]:
        return [p for p in self.penalties.values() if p.user_id == user_id and p.type == penalty_type]


class InMemoryCertificates:
    def __init__(self, posts: InMemoryPosts):
        self._posts = posts
        self.certificates: dict[int, Certificate] = {}
        self._id = 0

    def get_for_volunteer_and_post(self, *, volunteer_id: int, post_id: int) -> Optional[Certificate]:
        return next(
            (c for c in self.certificates.values() if c.volunteer_id == volunteer_id and c.post_id == post_id),
            None,
        )

    def volunteer_ids_with_certificate(self, *, post_id: int, volunteer_ids: Iterable[int]) -> set[int]:
        wanted = set(volunteer_ids)
        return {c.volunteer_id for c in self.certificates.values() if c.post_id == post_id and c.volunteer_id in wanted}

    def create(self, *, volunteer_id, post_id, organization_id, title, description, certificate_url, issued_date) -> int:
        if self.get_for_volunteer_and_post(volunteer_id=volunteer_id, post_id=post_id):
            raise ConflictError("Certificate already issued for this volunteer and post")
        self._id += 1
        self.certificates[self._id] = Certificate(
            certificate_id=self._id,
            volunteer_id=volunteer_id,
            post_id=post_id,
            organization_id=organization_id,
            title=title,
            issued_date=issued_date,
            description=description,
            certificate_url=certificate_url,
        )
        return self._id

    def get_by_id(self, certificate_id: int) -> Optional[Certificate]:
        return self.certificates.get(certificate_id)

    def list_for_volunteer(self, volunteer_id: int):
        return [c for c in self.certificates.values() if c.volunteer_id == volunteer_id]

    def list_for_post_author(self, author_id: int):
        return [
            c
            for c in self.certificates.values()
            if (post := self._posts.get_by_id(c.post_id)) is not None and post.author_id == author_id
        ]

    def list_all(self):
        return list(self.certificates.values())


class RecordingLock:
    """Volunteer lock that records which volunteers were locked and rejects re-entry."""

    def __init__(self):
        self.acquired: list[int] = []
        self.held: set[int] = set()

    def __call__(self, volunteer_id: int):
        lock = self

        class _Held:
            def __enter__(self):
                assert volunteer_id not in lock.held
                lock.held.add(volunteer_id)
                lock.acquired.append(volunteer_id)

            def __exit__(self, *exc):
                lock.held.discard(volunteer_id)
                return False

        return _Held()


class World:
    """In-memory repositories plus helpers to seed users, posts and applications."""

    def __init__(self, *, volunteer_lock=None):
        self.users = InMemoryUsers()
        self.posts = InMemoryPosts(self.users)
        self.applications = InMemoryApplications(self.users, self.posts)
        self.penalties = InMemoryPenalties()
        self.certificates = InMemoryCertificates(self.posts)

        extra = {"volunteer_lock": volunteer_lock} if volunteer_lock is not None else {}
        self.container: Container = assemble(
            users_repo=self.users,
            posts_repo=self.posts,
            applications_repo=self.applications,
            penalties_repo=self.penalties,
            certificates_repo=self.certificates,
            **extra,
        )

    def add_user(self, role: Role, *, name: str = "Someone", email: Optional[str] = None, password: str = "password123") -> Actor:
        email = email or f"user{self.users._id + 1}@example.org"
        user_id = self.users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
        )
        if role == Role.ORGANIZATION:
            self.users.create_organization(user_id=user_id, name=name)
        return Actor(user_id=user_id, role=role, name=name)

    def add_post(
        self,
        author: Actor,
        *,
        title: str = "Beach cleanup",
        category: str = "ENVIRONMENT",
        description: Optional[str] = None,
        status: PostStatus = PostStatus.PUBLISHED,
    ) -> int:
        return self.posts.create_post(
            author_id=author.user_id,
            organization_id=self.users.organizations.get(author.user_id),
            title=title,
            category=category,
            status=status,
            description=description,
        )

    def add_application(
        self,
        volunteer: Actor,
        post_id: int,
        *,
        status: ApplicationStatus = ApplicationStatus.APPROVED,
        attendance: AttendanceStatus = AttendanceStatus.NOT_MARKED,
        marked_at: Optional[datetime] = None,
        created_at: datetime = datetime(2025, 1, 1),
    ) -> int:
        application_id = self.applications.create(
            volunteer_id=volunteer.user_id,
            post_id=post_id,
            message=None,
            created_at=created_at,
        )
        self.applications.update_status(application_id=application_id, status=status)
        if attendance != AttendanceStatus.NOT_MARKED:
            self.applications.update_attendance(
                application_id=application_id,
                attendance_status=attendance,
                marked_at=marked_at,
            )
        return application_id

    def add_penalty(
        self,
        user: Actor,
        penalty_type: PenaltyType,
        *,
        created_at: datetime = datetime(2025, 1, 1),
        expires_at: Optional[datetime] = None,
        status: PenaltyStatus = PenaltyStatus.ACTIVE,
    ) -> int:
        penalty_id = self.penalties.create(
            user_id=user.user_id,
            type=penalty_type,
            reason="Seeded",
            created_at=created_at,
            expires_at=expires_at,
        )
        if status != PenaltyStatus.ACTIVE:
            self.penalties.update_status(penalty_id=penalty_id, status=status)
        return penalty_id
