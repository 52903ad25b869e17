"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, CompanyFactory, ...
"""

from tests.factories.base import BaseFactory, generate_uuid7, utc_now
from tests.factories.company import (
    CompanyCustomRoleFactory,
    CompanyFactory,
    CompanyInvitationFactory,
    CompanyMemberFactory,
)
from tests.factories.user import UserFactory

__all__ = [
    # Base
    "BaseFactory",
    "generate_uuid7",
    "utc_now",
    # User
    "UserFactory",
    # Company
    "CompanyFactory",
    "CompanyMemberFactory",
    "CompanyInvitationFactory",
    "CompanyCustomRoleFactory",
]
