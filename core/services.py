import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from gamification.ledger import PointsLedger
from .exceptions import AlreadyAMember, LastAdminRemoval, NotAnAdmin, NotFoundError, ValidationError
from .models import Group, Membership
from .permissions import is_admin, require_admin

logger = logging.getLogger("lyfez.groups")

User = get_user_model()


class GroupService:
    @staticmethod
    def create_group(creator, name) -> Group:
        """
        Create a group; the creator becomes its first ADMIN.
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Group name is required")

        with transaction.atomic():
            group = Group.objects.create(name=name[:255], created_by=creator)
            Membership.objects.create(group=group, user=creator, role=Membership.ROLE_ADMIN)

        logger.info("Group created: id=%s creator=%s", group.id, creator.id)
        return group

    @staticmethod
    def add_member(group, actor, email) -> Membership:
        require_admin(actor, group, "Only admins can add members")

        email = (email or "").strip()
        if not email:
            raise ValidationError("Email is required")

        user = User.objects.filter(email__iexact=email).first()
        if user is None:
            raise NotFoundError("User not found")

        if Membership.objects.filter(group=group, user=user).exists():
            raise AlreadyAMember()

        try:
            with transaction.atomic():
                membership = Membership.objects.create(
                    group=group,
                    user=user,
                    role=Membership.ROLE_MEMBER,
                )
        except IntegrityError:
            raise AlreadyAMember()

        logger.info("Member added: group=%s user=%s actor=%s", group.id, user.id, actor.id)
        return membership

    @staticmethod
    def remove_member(group, actor, membership_id) -> None:
        """
        Remove a membership. Admins may remove anyone; any member may
        remove themselves (leave). The group's admin rows are locked first
        so two concurrent removals cannot both pass the last-admin check.

        Submissions already decided keep their status; open ones are not
        re-evaluated against the smaller group.
        """
        own = Membership.objects.filter(pk=membership_id, group=group, user=actor).exists()
        if not own and not is_admin(actor, group):
            raise NotAnAdmin("Only admins can remove members")

        with transaction.atomic():
            admin_ids = list(
                Membership.objects
                .select_for_update()
                .filter(group=group, role=Membership.ROLE_ADMIN)
                .values_list("id", flat=True)
            )
            target = (
                Membership.objects
                .select_for_update()
                .filter(pk=membership_id, group=group)
                .first()
            )
            if target is None:
                raise NotFoundError("Member not found")

            if target.is_admin and len(admin_ids) <= 1:
                raise LastAdminRemoval()

            target.delete()

        logger.info("Member removed: group=%s membership=%s actor=%s", group.id, membership_id, actor.id)

    @staticmethod
    def set_member_points(group, actor, user_id, points) -> Membership:
        """Admin override of a member's balance; goes through the ledger."""
        require_admin(actor, group, "Only admins can update member points")

        try:
            value = int(points)
        except (TypeError, ValueError):
            raise ValidationError("Points must be a whole number")

        membership = Membership.objects.filter(group=group, user_id=user_id).first()
        if membership is None:
            raise NotFoundError("Member not found in this group")

        return PointsLedger.admin_set(membership, value, actor=actor)
