from .exceptions import NotAMember, NotAnAdmin, NotFoundError
from .models import Group, Membership


# ---- Helper functions -------------------------------------------------


def group_member_count(group) -> int:
    """
    Current number of memberships in a group.
    Read fresh on every call; quorum decisions never use a snapshot.
    """
    return Membership.objects.filter(group=group).count()


def is_member(user, group) -> bool:
    if not user or not user.is_authenticated or group is None:
        return False

    return Membership.objects.filter(user=user, group=group).exists()


def is_admin(user, group) -> bool:
    if not user or not user.is_authenticated or group is None:
        return False

    return Membership.objects.filter(
        user=user,
        group=group,
        role=Membership.ROLE_ADMIN,
    ).exists()


def get_group(group_id) -> Group:
    try:
        return Group.objects.get(pk=group_id)
    except Group.DoesNotExist:
        raise NotFoundError("Group not found")


def require_membership(user, group) -> Membership:
    """
    Return the user's membership in ``group`` or raise ``NotAMember``.
    """
    membership = Membership.objects.filter(user=user, group=group).first()
    if membership is None:
        raise NotAMember()
    return membership


def require_admin(user, group, detail=None) -> Membership:
    membership = Membership.objects.filter(
        user=user,
        group=group,
        role=Membership.ROLE_ADMIN,
    ).first()
    if membership is None:
        raise NotAnAdmin(detail)
    return membership

