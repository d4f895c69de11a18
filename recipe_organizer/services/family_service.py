"""Family group membership service.

Each operation is a single read-modify-write of one ``FamilyGroup``: load the
aggregate, check the actor's permission, let the aggregate mutate its roster,
then save it with a version check.
"""

import logging
from typing import List, Optional, Tuple

from recipe_organizer.errors import (
    AdminGroupExists,
    ConcurrentModification,
    Forbidden,
    NotFound,
)
from recipe_organizer.models.family_group import ROLE_MEMBER, FamilyGroup, Member, utc_now
from recipe_organizer.services.database_service import DatabaseService, db_service, generate_id
from recipe_organizer.services.invite_codes import generate_unique_invite_code

logger = logging.getLogger(__name__)


class FamilyService:
    """Membership and invitation operations on family groups"""

    def __init__(self, db: DatabaseService):
        self.db = db

    # =========================================================================
    # Loading / saving
    # =========================================================================

    def load(self, group_id: str) -> FamilyGroup:
        doc = self.db.get_family_group(group_id)
        if not doc:
            raise NotFound("Family group not found", {"group_id": group_id})
        return FamilyGroup.from_document(doc)

    def save(self, group: FamilyGroup) -> FamilyGroup:
        """Persist ``group`` if nobody else saved it since it was loaded"""
        expected_version = group.version
        group.version = expected_version + 1
        group.updated_at = utc_now()

        if not self.db.replace_family_group(group.to_document(), expected_version):
            group.version = expected_version
            logger.warning(f"Concurrent modification of family group {group.id} (version {expected_version})")
            raise ConcurrentModification(
                "Family group was modified by another request, please retry",
                group_id=group.id,
                expected_version=expected_version,
            )
        return group

    def _load_for_member(self, group_id: str, user_id: str) -> FamilyGroup:
        group = self.load(group_id)
        if not group.is_active_member(user_id):
            raise Forbidden("You are not a member of this family group", {"group_id": group_id})
        return group

    def _load_for_admin(self, group_id: str, user_id: str, message: str) -> FamilyGroup:
        group = self.load(group_id)
        if not group.is_admin(user_id):
            raise Forbidden(message, {"group_id": group_id})
        return group

    # =========================================================================
    # Group operations
    # =========================================================================

    def create_group(
        self,
        user_id: str,
        name: str,
        description: Optional[str] = None,
        settings: Optional[dict] = None,
    ) -> FamilyGroup:
        """Create a group with ``user_id`` as its sole admin.

        The admin check, invite code generation and insert run under the
        database lock so concurrent creations cannot interleave.
        """
        with self.db.transaction():
            if self.db.get_family_group_by_admin(user_id):
                raise AdminGroupExists(
                    "You already have a family group. Leave it first to create a new one.",
                    {"user_id": user_id},
                )

            invite_code = generate_unique_invite_code(self.db.invite_code_exists)
            group = FamilyGroup.create(
                group_id=generate_id(),
                name=name,
                admin_id=user_id,
                invite_code=invite_code,
                description=description,
                settings=settings,
            )
            self.db.insert_family_group(group.to_document())

        return group

    def list_groups(self, user_id: str) -> List[FamilyGroup]:
        return [FamilyGroup.from_document(doc) for doc in self.db.get_user_family_groups(user_id)]

    def get_group(self, group_id: str, user_id: str) -> FamilyGroup:
        return self._load_for_member(group_id, user_id)

    def update_group(
        self,
        group_id: str,
        user_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        settings: Optional[dict] = None,
    ) -> FamilyGroup:
        group = self._load_for_admin(group_id, user_id, "Only admins can update family group settings")
        group.update_details(name=name, description=description, settings=settings)
        self.save(group)
        logger.info(f"Family group {group_id} updated by {user_id}")
        return group

    # =========================================================================
    # Membership operations
    # =========================================================================

    def invite_member(self, group_id: str, user_id: str, email: str) -> FamilyGroup:
        group = self._load_for_member(group_id, user_id)

        if not group.is_admin(user_id) and not group.settings.allow_member_invites:
            raise Forbidden("Only admins can invite members to this family group", {"group_id": group_id})

        invitee = self.db.get_user_by_email(email)
        if not invitee:
            raise NotFound("User with this email not found", {"email": email.lower()})

        _, reactivated = group.add_member(invitee["id"])
        self.save(group)
        logger.info(
            f"User {invitee['id']} {'re-added' if reactivated else 'invited'} "
            f"to family group {group_id} by {user_id}"
        )
        return group

    def join_by_code(self, user_id: str, invite_code: str) -> FamilyGroup:
        code = invite_code.strip().upper()
        doc = self.db.get_family_group_by_invite_code(code)
        if not doc:
            raise NotFound("Invalid invite code")

        group = FamilyGroup.from_document(doc)
        group.add_member(user_id, role=ROLE_MEMBER)
        self.save(group)
        logger.info(f"User {user_id} joined family group {group.id} with invite code")
        return group

    def update_member(
        self,
        group_id: str,
        user_id: str,
        member_id: str,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> FamilyGroup:
        group = self._load_for_admin(group_id, user_id, "Only admins can update member roles")
        group.update_member(member_id, role=role, is_active=is_active)
        self.save(group)
        logger.info(f"Member {member_id} of family group {group_id} updated by {user_id}")
        return group

    def remove_member(self, group_id: str, user_id: str, member_id: str) -> Tuple[FamilyGroup, Member]:
        group = self.load(group_id)
        if not group.is_admin(user_id) and user_id != member_id:
            raise Forbidden("You can only remove yourself or be an admin to remove others", {"group_id": group_id})

        member = group.require_member(member_id)
        if not member.is_active:
            return group, member

        group.deactivate_member(member_id)
        self.save(group)
        logger.info(f"Member {member_id} removed from family group {group_id} by {user_id}")
        return group, member

    def leave_group(self, group_id: str, user_id: str) -> Tuple[FamilyGroup, Member]:
        group = self.load(group_id)
        if not group.is_active_member(user_id):
            raise NotFound("You are not a member of this family group", {"group_id": group_id})

        member = group.deactivate_member(
            user_id,
            message="Cannot leave family group as the only admin. Please assign another admin first.",
        )
        self.save(group)
        logger.info(f"User {user_id} left family group {group_id}")
        return group, member


# Singleton instance
family_service = FamilyService(db_service)
