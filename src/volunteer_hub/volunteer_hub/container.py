from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .applications.mysql_application_repository import MySQLApplicationRepository
from .applications.repository import ApplicationRepository
from .applications.service import ApplicationService
from .attendance.service import AttendanceReportService, AttendanceTracker
from .certificates.mysql_certificate_repository import MySQLCertificateRepository
from .certificates.repository import CertificateRepository
from .certificates.service import CertificateService
from .database.connection import DBConfig, DatabaseConnection
from .database.locks import MySQLVolunteerLock, VolunteerLock, no_lock
from .eligibility.gate import EligibilityGate
from .moderation.service import ModerationService
from .penalties.mysql_penalty_repository import MySQLPenaltyRepository
from .penalties.repository import PenaltyRepository
from .penalties.service import PenaltyEscalator
from .posts.mysql_post_repository import MySQLPostRepository
from .posts.repository import PostRepository
from .posts.service import PostService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, ProfileService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    posts_repo: PostRepository
    applications_repo: ApplicationRepository
    penalties_repo: PenaltyRepository
    certificates_repo: CertificateRepository

    auth_service: AuthService
    user_service: UserService
    profile_service: ProfileService
    post_service: PostService
    eligibility_gate: EligibilityGate
    penalty_escalator: PenaltyEscalator
    attendance_tracker: AttendanceTracker
    attendance_report_service: AttendanceReportService
    application_service: ApplicationService
    certificate_service: CertificateService
    moderation_service: ModerationService


def assemble(
    *,
    users_repo: UserRepository,
    posts_repo: PostRepository,
    applications_repo: ApplicationRepository,
    penalties_repo: PenaltyRepository,
    certificates_repo: CertificateRepository,
    volunteer_lock: VolunteerLock = no_lock,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of any repository implementations."""
    gate = EligibilityGate(penalties_repo, certificates_repo)
    escalator = PenaltyEscalator(penalties_repo, users_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        posts_repo=posts_repo,
        applications_repo=applications_repo,
        penalties_repo=penalties_repo,
        certificates_repo=certificates_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        profile_service=ProfileService(users_repo),
        post_service=PostService(posts_repo),
        eligibility_gate=gate,
        penalty_escalator=escalator,
        attendance_tracker=AttendanceTracker(
            applications_repo,
            posts_repo,
            escalator,
            volunteer_lock=volunteer_lock,
        ),
        attendance_report_service=AttendanceReportService(applications_repo),
        application_service=ApplicationService(applications_repo, posts_repo, gate),
        certificate_service=CertificateService(certificates_repo, applications_repo, posts_repo, gate),
        moderation_service=ModerationService(posts_repo, users_repo, applications_repo),
    )


def build_container(*, db_config: dict, use_volunteer_lock: bool = False) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_settings(db_config))

    return assemble(
        users_repo=MySQLUserRepository(conn),
        posts_repo=MySQLPostRepository(conn),
        applications_repo=MySQLApplicationRepository(conn),
        penalties_repo=MySQLPenaltyRepository(conn),
        certificates_repo=MySQLCertificateRepository(conn),
        volunteer_lock=MySQLVolunteerLock(conn) if use_volunteer_lock else no_lock,
        conn=conn,
    )
