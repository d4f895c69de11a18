"""Family group API models"""

from typing import Dict, List, Literal, Optional

from pydantic import EmailStr, Field, field_validator

from recipe_organizer.models.base import CamelModel, RequestModel
from recipe_organizer.models.family_group import FamilyGroup, Member


class FamilySettingsUpdate(RequestModel):
    """Partial settings overlay; omitted flags keep their current value"""
    allow_member_invites: Optional[bool] = None
    require_approval_for_recipes: Optional[bool] = None
    shared_pantry: Optional[bool] = None
    shared_meal_plans: Optional[bool] = None
    shared_shopping_lists: Optional[bool] = None


class FamilyGroupCreateRequest(RequestModel):
    """Request model for creating a family group"""
    name: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=200)
    settings: Optional[FamilySettingsUpdate] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class FamilyGroupUpdateRequest(RequestModel):
    """Request model for updating a family group"""
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=200)
    settings: Optional[FamilySettingsUpdate] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class InviteMemberRequest(RequestModel):
    email: EmailStr


class JoinFamilyRequest(RequestModel):
    invite_code: str = Field(..., min_length=1, max_length=32)

    @field_validator("invite_code", mode="before")
    @classmethod
    def normalize_code(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


class MemberUpdateRequest(RequestModel):
    role: Optional[Literal["admin", "member"]] = None
    is_active: Optional[bool] = None


class FamilySettingsResponse(CamelModel):
    allow_member_invites: bool
    require_approval_for_recipes: bool
    shared_pantry: bool
    shared_meal_plans: bool
    shared_shopping_lists: bool


class FamilyMemberResponse(CamelModel):
    """Roster entry enriched with the user's name and email"""
    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: str
    joined_at: str
    is_active: bool

    @classmethod
    def from_member(cls, member: Member, user: Optional[dict] = None) -> "FamilyMemberResponse":
        return cls(
            user_id=member.user_id,
            name=user.get("name") if user else None,
            email=user.get("email") if user else None,
            role=member.role,
            joined_at=member.joined_at,
            is_active=member.is_active,
        )


class FamilyGroupResponse(CamelModel):
    """Response model for a family group, seen by one user"""
    id: str
    name: str
    description: Optional[str] = None
    admin_id: str
    invite_code: str
    settings: FamilySettingsResponse
    members: List[FamilyMemberResponse]
    created_at: str
    updated_at: str

    # Computed for the requesting user
    user_role: Optional[str] = None
    is_admin: bool = False
    member_count: int

    @classmethod
    def from_group(
        cls,
        group: FamilyGroup,
        user_id: str,
        users: Optional[Dict[str, dict]] = None,
    ) -> "FamilyGroupResponse":
        users = users or {}
        member = group.get_member(user_id)
        return cls(
            id=group.id,
            name=group.name,
            description=group.description,
            admin_id=group.admin_id,
            invite_code=group.invite_code,
            settings=FamilySettingsResponse(**vars(group.settings)),
            members=[
                FamilyMemberResponse.from_member(m, users.get(m.user_id))
                for m in group.members.values()
            ],
            created_at=group.created_at,
            updated_at=group.updated_at,
            user_role=member.role if member and member.is_active else None,
            is_admin=group.is_admin(user_id),
            member_count=group.member_count,
        )


class FamilyMemberActionResponse(CamelModel):
    """Result of removing a member or leaving a group"""
    message: str
    member: FamilyMemberResponse
    member_count: int
