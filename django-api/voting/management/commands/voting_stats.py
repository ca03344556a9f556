"""Print per-talk voting statistics across every session."""

import csv

from django.core.management.base import BaseCommand, CommandError

from voting.domain.errors import TalkSourceError
from voting.domain.ranking import calculate_fairness_metrics
from voting.services import factory

COLUMNS = ["talk_id", "title", "seen", "voted_for", "voted_against", "skipped"]


class Command(BaseCommand):
    help = "Aggregate recorded votes into seen/for/against/skipped counts per talk."

    def add_arguments(self, parser):
        parser.add_argument("--csv", dest="csv_path", help="Write the table to this CSV file.")

    def handle(self, *args, csv_path=None, **options):
        service = factory.build_voting_service()
        try:
            stats = service.collect_statistics()
        except TalkSourceError as exc:
            raise CommandError(exc.message) from exc

        rows = [
            [
                entry.talk.id.value,
                entry.talk.title,
                entry.times_seen,
                entry.times_voted_for,
                entry.times_voted_against,
                entry.times_skipped,
            ]
            for entry in stats
        ]

        if csv_path:
            with open(csv_path, "w", newline="", encoding="utf-8") as handle:
                writer = csv.writer(handle)
                writer.writerow(COLUMNS)
                writer.writerows(rows)
            self.stdout.write(self.style.SUCCESS(f"Wrote {len(rows)} talks to {csv_path}"))
            return

        self.stdout.write(f"Sessions: {service.count_sessions()}")
        outdated = service.count_outdated_sessions()
        if outdated:
            self.stdout.write(f"Skipped sessions from other versions: {outdated}")
        self.stdout.write("\t".join(COLUMNS))
        for row in rows:
            self.stdout.write("\t".join(str(value) for value in row))

        if stats:
            self._write_fairness([entry.times_seen for entry in stats])

    def _write_fairness(self, appearances):
        metrics = calculate_fairness_metrics(appearances)
        self.stdout.write("")
        self.stdout.write("Fairness")
        self.stdout.write(f"mean_appearances\t{metrics.mean_appearances:.2f}")
        self.stdout.write(f"standard_deviation\t{metrics.standard_deviation:.2f}")
        self.stdout.write(f"coefficient_of_variation\t{metrics.coefficient_of_variation:.3f}")
        self.stdout.write(f"gini_coefficient\t{metrics.gini_coefficient:.3f}")
        self.stdout.write(
            f"appearances\tmin {metrics.min_appearances}, max {metrics.max_appearances}, "
            f"range {metrics.range}"
        )
        self.stdout.write(f"chi_square\t{metrics.chi_square_statistic:.2f}")
        self.stdout.write(f"uniform\t{'yes' if metrics.is_distribution_uniform else 'no'}")
