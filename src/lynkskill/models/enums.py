"""Shared enums for models.

Values are stored verbatim in the database, so they must never be renamed.
"""

from enum import Enum


class Permission(str, Enum):
    """Capability a company member can hold."""

    # Company management
    DELETE_COMPANY = "DELETE_COMPANY"
    EDIT_COMPANY = "EDIT_COMPANY"
    TRANSFER_OWNERSHIP = "TRANSFER_OWNERSHIP"

    # Member management
    MANAGE_MEMBERS = "MANAGE_MEMBERS"
    INVITE_MEMBERS = "INVITE_MEMBERS"
    REMOVE_MEMBERS = "REMOVE_MEMBERS"
    CHANGE_ROLES = "CHANGE_ROLES"
    DELEGATE_PERMISSIONS = "DELEGATE_PERMISSIONS"

    # Internships
    CREATE_INTERNSHIPS = "CREATE_INTERNSHIPS"
    EDIT_INTERNSHIPS = "EDIT_INTERNSHIPS"
    DELETE_INTERNSHIPS = "DELETE_INTERNSHIPS"

    # Applications
    VIEW_APPLICATIONS = "VIEW_APPLICATIONS"
    MANAGE_APPLICATIONS = "MANAGE_APPLICATIONS"
    REVIEW_COVER_LETTERS = "REVIEW_COVER_LETTERS"

    # Candidates
    VIEW_CANDIDATES = "VIEW_CANDIDATES"
    SEARCH_CANDIDATES = "SEARCH_CANDIDATES"

    # Interviews
    SCHEDULE_INTERVIEWS = "SCHEDULE_INTERVIEWS"
    CONDUCT_INTERVIEWS = "CONDUCT_INTERVIEWS"

    # Messaging
    SEND_MESSAGES = "SEND_MESSAGES"
    VIEW_MESSAGES = "VIEW_MESSAGES"

    # Experience & assignments
    CREATE_ASSIGNMENTS = "CREATE_ASSIGNMENTS"
    GRADE_EXPERIENCES = "GRADE_EXPERIENCES"


class DefaultRole(str, Enum):
    """Built-in company roles."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    HR_MANAGER = "HR_MANAGER"
    HR_RECRUITER = "HR_RECRUITER"
    VIEWER = "VIEWER"
    MEMBER = "MEMBER"


class MemberStatus(str, Enum):
    """Company membership lifecycle status."""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    REMOVED = "REMOVED"


class UserRole(str, Enum):
    """Account-level role tag (None until onboarding picks one)."""

    STUDENT = "STUDENT"
    COMPANY = "COMPANY"
    TEAM_MEMBER = "TEAM_MEMBER"


class NotificationType(str, Enum):
    """In-app notification kinds emitted by the team core."""

    TEAM_INVITATION = "TEAM_INVITATION"
    TEAM_INVITATION_ACCEPTED = "TEAM_INVITATION_ACCEPTED"
    TEAM_MEMBER_JOINED = "TEAM_MEMBER_JOINED"
    TEAM_ROLE_CHANGED = "TEAM_ROLE_CHANGED"
    TEAM_MEMBER_REMOVED = "TEAM_MEMBER_REMOVED"
    OWNERSHIP_TRANSFERRED = "OWNERSHIP_TRANSFERRED"
