"""Family group routes"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from recipe_organizer.auth.jwt import get_current_user
from recipe_organizer.models.family import (
    FamilyGroupCreateRequest,
    FamilyGroupResponse,
    FamilyGroupUpdateRequest,
    FamilyMemberActionResponse,
    FamilyMemberResponse,
    InviteMemberRequest,
    JoinFamilyRequest,
    MemberUpdateRequest,
)
from recipe_organizer.models.family_group import FamilyGroup, Member
from recipe_organizer.services.database_service import db_service
from recipe_organizer.services.family_service import family_service

logger = logging.getLogger(__name__)
router = APIRouter()


def _member_users(group: FamilyGroup) -> dict:
    """Look up the user records of every roster entry"""
    users = {}
    for user_id in group.members:
        user = db_service.get_user_by_id(user_id)
        if user:
            users[user_id] = user
    return users


def _group_view(group: FamilyGroup, user_id: str) -> FamilyGroupResponse:
    return FamilyGroupResponse.from_group(group, user_id, _member_users(group))


def _member_action(message: str, group: FamilyGroup, member: Member) -> FamilyMemberActionResponse:
    return FamilyMemberActionResponse(
        message=message,
        member=FamilyMemberResponse.from_member(member, db_service.get_user_by_id(member.user_id)),
        member_count=group.member_count,
    )


@router.get("", response_model=List[FamilyGroupResponse])
async def list_family_groups(
    current_user: dict = Depends(get_current_user)
):
    """Get all family groups the current user is an active member of"""
    groups = family_service.list_groups(current_user["id"])
    return [_group_view(group, current_user["id"]) for group in groups]


@router.post("", response_model=FamilyGroupResponse, status_code=status.HTTP_201_CREATED)
async def create_family_group(
    request: FamilyGroupCreateRequest,
    current_user: dict = Depends(get_current_user)
):
    """Create a family group with the current user as its admin"""
    group = family_service.create_group(
        user_id=current_user["id"],
        name=request.name,
        description=request.description,
        settings=request.settings.model_dump(exclude_unset=True) if request.settings else None,
    )
    logger.info(f"Family group {group.id} created by {current_user['id']}")
    return _group_view(group, current_user["id"])


@router.post("/join", response_model=FamilyGroupResponse)
async def join_family_group(
    request: JoinFamilyRequest,
    current_user: dict = Depends(get_current_user)
):
    """Join a family group using its invite code"""
    group = family_service.join_by_code(current_user["id"], request.invite_code)
    return _group_view(group, current_user["id"])


@router.get("/{group_id}", response_model=FamilyGroupResponse)
async def get_family_group(
    group_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Get a family group the current user belongs to"""
    group = family_service.get_group(group_id, current_user["id"])
    return _group_view(group, current_user["id"])


@router.put("/{group_id}", response_model=FamilyGroupResponse)
async def update_family_group(
    group_id: str,
    request: FamilyGroupUpdateRequest,
    current_user: dict = Depends(get_current_user)
):
    """Update name, description or settings (admin only)"""
    group = family_service.update_group(
        group_id,
        current_user["id"],
        name=request.name,
        description=request.description,
        settings=request.settings.model_dump(exclude_unset=True) if request.settings else None,
    )
    return _group_view(group, current_user["id"])


@router.post("/{group_id}/invite", response_model=FamilyGroupResponse)
async def invite_member(
    group_id: str,
    request: InviteMemberRequest,
    current_user: dict = Depends(get_current_user)
):
    """Add an existing user to the group by email"""
    group = family_service.invite_member(group_id, current_user["id"], request.email)
    return _group_view(group, current_user["id"])


@router.put("/{group_id}/members/{member_id}", response_model=FamilyGroupResponse)
async def update_member(
    group_id: str,
    member_id: str,
    request: MemberUpdateRequest,
    current_user: dict = Depends(get_current_user)
):
    """Change a member's role or active flag (admin only)"""
    group = family_service.update_member(
        group_id,
        current_user["id"],
        member_id,
        role=request.role,
        is_active=request.is_active,
    )
    return _group_view(group, current_user["id"])


@router.delete("/{group_id}/members/{member_id}", response_model=FamilyMemberActionResponse)
async def remove_member(
    group_id: str,
    member_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Deactivate a member (admins, or members removing themselves)"""
    group, member = family_service.remove_member(group_id, current_user["id"], member_id)
    return _member_action("Member removed successfully", group, member)


@router.post("/{group_id}/leave", response_model=FamilyMemberActionResponse)
async def leave_family_group(
    group_id: str,
    current_user: dict = Depends(get_current_user)
):
    """Leave a family group"""
    group, member = family_service.leave_group(group_id, current_user["id"])
    return _member_action("Left family group successfully", group, member)
