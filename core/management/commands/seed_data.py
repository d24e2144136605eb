from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model

from activities.models import Activity
from core.models import Group, Membership

User = get_user_model()


class Command(BaseCommand):
    help = "Seeds the database with a sample group, members and activities"

    def handle(self, *args, **options):
        self.stdout.write("Seeding data...")

        # 1. Ensure Users
        people = {}
        for email, name in [
            ("admin@example.com", "Admin"),
            ("alice@example.com", "Alice"),
            ("bob@example.com", "Bob"),
        ]:
            user, created = User.objects.get_or_create(
                email=email,
                defaults={"username": email, "name": name},
            )
            if created or not user.check_password("password"):
                user.set_password("password")
                user.save()
            people[name] = user

        # 2. Create Group
        group, _ = Group.objects.get_or_create(
            name="Morning Routine",
            defaults={"created_by": people["Admin"]},
        )
        self.stdout.write(f"Used Group: {group.name}")

        for name, role in [
            ("Admin", Membership.ROLE_ADMIN),
            ("Alice", Membership.ROLE_MEMBER),
            ("Bob", Membership.ROLE_MEMBER),
        ]:
            Membership.objects.get_or_create(group=group, user=people[name], defaults={"role": role})

        # 3. Create Activities
        for title, description, points in [
            ("Run 5k", "Any pace counts.", 10),
            ("Read 20 pages", "Fiction or not.", 5),
            ("No phone before 9am", "Honour system, proof optional.", 3),
        ]:
            Activity.objects.get_or_create(
                group=group,
                title=title,
                defaults={"description": description, "points": points},
            )

        self.stdout.write(self.style.SUCCESS("Seed complete. Log in as admin@example.com / password"))
