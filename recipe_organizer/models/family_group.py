"""Family group aggregate.

A family group owns its roster: every change to a member goes through the
methods on ``FamilyGroup`` so that the "at least one active admin" rule is
checked in a single place. Members are never deleted, only deactivated.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from recipe_organizer.errors import AlreadyMember, NotFound, SoleAdminViolation, ValidationFailed

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"
ROLES = (ROLE_ADMIN, ROLE_MEMBER)


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Member:
    """Roster entry; ``user_id`` doubles as the member id"""
    user_id: str
    role: str = ROLE_MEMBER
    joined_at: str = field(default_factory=utc_now)
    is_active: bool = True

    @property
    def is_active_admin(self) -> bool:
        return self.is_active and self.role == ROLE_ADMIN


@dataclass
class FamilySettings:
    """Sharing and approval policy flags"""
    allow_member_invites: bool = True
    require_approval_for_recipes: bool = False
    shared_pantry: bool = True
    shared_meal_plans: bool = True
    shared_shopping_lists: bool = True

    def merged(self, overrides: Optional[dict]) -> "FamilySettings":
        """Return a copy with the non-null values of ``overrides`` applied"""
        values = asdict(self)
        for key, value in (overrides or {}).items():
            if key in values and value is not None:
                values[key] = bool(value)
        return FamilySettings(**values)


@dataclass
class FamilyGroup:
    id: str
    name: str
    admin_id: str
    invite_code: str
    description: Optional[str] = None
    settings: FamilySettings = field(default_factory=FamilySettings)
    members: Dict[str, Member] = field(default_factory=dict)
    version: int = 0
    created_at: str = field(default_factory=utc_now)
    updated_at: str = field(default_factory=utc_now)

    # =========================================================================
    # Construction / persistence
    # =========================================================================

    @classmethod
    def create(
        cls,
        group_id: str,
        name: str,
        admin_id: str,
        invite_code: str,
        description: Optional[str] = None,
        settings: Optional[dict] = None,
    ) -> "FamilyGroup":
        """New group whose creator is its sole active admin"""
        now = utc_now()
        group = cls(
            id=group_id,
            name=name,
            admin_id=admin_id,
            invite_code=invite_code.upper(),
            description=description,
            settings=FamilySettings().merged(settings),
            created_at=now,
            updated_at=now,
        )
        group.members[admin_id] = Member(user_id=admin_id, role=ROLE_ADMIN, joined_at=now)
        return group

    @classmethod
    def from_document(cls, doc: dict) -> "FamilyGroup":
        members: Dict[str, Member] = {}
        for entry in doc.get("members", []):
            members[entry["user_id"]] = Member(
                user_id=entry["user_id"],
                role=entry.get("role", ROLE_MEMBER),
                joined_at=entry.get("joined_at") or utc_now(),
                is_active=entry.get("is_active", True),
            )
        return cls(
            id=doc["id"],
            name=doc["name"],
            admin_id=doc["admin_id"],
            invite_code=doc["invite_code"],
            description=doc.get("description"),
            settings=FamilySettings().merged(doc.get("settings")),
            members=members,
            version=doc.get("version", 0),
            created_at=doc.get("created_at") or utc_now(),
            updated_at=doc.get("updated_at") or utc_now(),
        )

    def to_document(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "admin_id": self.admin_id,
            "invite_code": self.invite_code,
            "settings": asdict(self.settings),
            # Stored as a list to keep join order
            "members": [asdict(member) for member in self.members.values()],
            "version": self.version,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    # =========================================================================
    # Queries
    # =========================================================================

    def get_member(self, user_id: str) -> Optional[Member]:
        return self.members.get(user_id)

    def require_member(self, user_id: str) -> Member:
        member = self.members.get(user_id)
        if member is None:
            raise NotFound("Member not found", {"group_id": self.id, "user_id": user_id})
        return member

    def is_active_member(self, user_id: str) -> bool:
        member = self.members.get(user_id)
        return member is not None and member.is_active

    def is_admin(self, user_id: str) -> bool:
        """Effective admin power: an active member holding the admin role"""
        member = self.members.get(user_id)
        return member is not None and member.is_active_admin

    def active_members(self) -> List[Member]:
        return [m for m in self.members.values() if m.is_active]

    def active_admins(self) -> List[Member]:
        return [m for m in self.members.values() if m.is_active_admin]

    @property
    def member_count(self) -> int:
        return len(self.active_members())

    # =========================================================================
    # Mutations
    # =========================================================================

    def update_details(
        self,
        name: Optional[str] = None,
        description: Optional[str] = None,
        settings: Optional[dict] = None,
    ):
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if settings:
            self.settings = self.settings.merged(settings)

    def add_member(self, user_id: str, role: Optional[str] = None) -> Tuple[Member, bool]:
        """Append a member, or reactivate a former one.

        A new entry gets ``role`` or ``member``. A reactivated entry keeps its
        stored role unless ``role`` is given.

        Returns the roster entry and whether it was a reactivation.
        """
        if role is not None and role not in ROLES:
            raise ValidationFailed(f"Invalid role: {role}")

        existing = self.members.get(user_id)
        if existing is not None and existing.is_active:
            raise AlreadyMember(
                "User is already a member of this family group",
                group_id=self.id,
                user_id=user_id,
            )

        now = utc_now()
        if existing is not None:
            existing.is_active = True
            if role is not None:
                existing.role = role
            existing.joined_at = now
            return existing, True

        member = Member(user_id=user_id, role=role or ROLE_MEMBER, joined_at=now)
        self.members[user_id] = member
        return member, False

    def update_member(
        self,
        user_id: str,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Member:
        member = self.require_member(user_id)

        if role is not None and role not in ROLES:
            raise ValidationFailed(f"Invalid role: {role}")

        new_role = role if role is not None else member.role
        new_active = is_active if is_active is not None else member.is_active

        self._ensure_admin_remains(
            user_id,
            new_role,
            new_active,
            "Cannot remove admin role. Family group must have at least one admin.",
        )

        if new_active and not member.is_active:
            member.joined_at = utc_now()
        member.role = new_role
        member.is_active = new_active
        return member

    def deactivate_member(self, user_id: str, message: Optional[str] = None) -> Member:
        """Soft-remove a member; role and join history are kept"""
        member = self.require_member(user_id)
        self._ensure_admin_remains(
            user_id,
            member.role,
            False,
            message or "Cannot remove the last admin. Please assign another admin first.",
        )
        member.is_active = False
        return member

    def _ensure_admin_remains(self, user_id: str, role: str, is_active: bool, message: str):
        """Reject a change to ``user_id`` that would leave no active admin"""
        if is_active and role == ROLE_ADMIN:
            return
        others = [m for m in self.active_admins() if m.user_id != user_id]
        if not others:
            raise SoleAdminViolation(message, group_id=self.id, user_id=user_id)
