from django.core.management.base import BaseCommand

from activities import quorum
from activities.models import Submission


class Command(BaseCommand):
    help = (
        "Re-run the quorum decision for open submissions against the current "
        "group size. Membership changes do not re-evaluate submissions on their "
        "own; this sweep is the explicit way to do it."
    )

    def add_arguments(self, parser):
        parser.add_argument("--group", type=int, help="Only submissions of this group id")
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report the open submissions without re-evaluating them",
        )

    def handle(self, *args, **options):
        qs = Submission.objects.filter(status__in=Submission.OPEN_STATUSES)
        if options.get("group"):
            qs = qs.filter(activity__group_id=options["group"])

        ids = list(qs.order_by("created_at").values_list("id", flat=True))
        self.stdout.write(f"Open submissions: {len(ids)}")

        if options.get("dry_run"):
            return

        changed = 0
        for submission_id in ids:
            old, new = quorum.reevaluate(submission_id)
            if old != new:
                changed += 1
                self.stdout.write(f"  #{submission_id}: {old} -> {new}")

        self.stdout.write(self.style.SUCCESS(f"Re-evaluated {len(ids)} submissions, {changed} changed"))
