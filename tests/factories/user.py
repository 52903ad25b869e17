"""User factories for test data generation."""

from polyfactory import Use

from src.lynkskill.models import User
from src.lynkskill.models.enums import UserRole
from tests.factories.base import BaseFactory, generate_uuid7, utc_now


class UserFactory(BaseFactory):
    """Factory for generating User test data."""

    __model__ = User

    id = Use(generate_uuid7)
    external_id = Use(lambda: f"idp_{generate_uuid7().hex}")
    email = Use(lambda: f"user_{generate_uuid7().hex[-8:]}@example.com")
    full_name = "Test User"
    role = None
    is_active = True
    created_at = Use(utc_now)
    updated_at = Use(utc_now)

    @classmethod
    def student(cls, **kwargs):
        """Create a student account."""
        return cls.build(role=UserRole.STUDENT.value, **kwargs)

    @classmethod
    def company_owner(cls, **kwargs):
        """Create a company-owner account."""
        return cls.build(role=UserRole.COMPANY.value, **kwargs)

    @classmethod
    def team_member(cls, **kwargs):
        """Create an account already on a company team."""
        return cls.build(role=UserRole.TEAM_MEMBER.value, **kwargs)
