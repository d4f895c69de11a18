"""Models package - family group aggregate and Pydantic models for API request/response"""

from recipe_organizer.models.family_group import (
    FamilyGroup,
    FamilySettings,
    Member,
    ROLE_ADMIN,
    ROLE_MEMBER,
)
from recipe_organizer.models.family import (
    FamilyGroupCreateRequest,
    FamilyGroupUpdateRequest,
    FamilyGroupResponse,
    FamilyMemberActionResponse,
    InviteMemberRequest,
    JoinFamilyRequest,
    MemberUpdateRequest,
)

__all__ = [
    # Aggregate
    "FamilyGroup",
    "FamilySettings",
    "Member",
    "ROLE_ADMIN",
    "ROLE_MEMBER",
    # Family API
    "FamilyGroupCreateRequest",
    "FamilyGroupUpdateRequest",
    "FamilyGroupResponse",
    "FamilyMemberActionResponse",
    "InviteMemberRequest",
    "JoinFamilyRequest",
    "MemberUpdateRequest",
]
