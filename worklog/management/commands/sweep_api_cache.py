from django.core.management.base import BaseCommand, CommandError

from worklog.cache.response_cache import ResponseCache


class Command(BaseCommand):
    help = "Remove cached API responses older than the configured maximum age."

    def add_arguments(self, parser):
        parser.add_argument(
            "--max-age-days",
            type=int,
            dest="max_age_days",
            help="Override WORKLOG_API_CACHE['max_age_days'].",
        )

    def handle(self, *args, **options):
        max_age_days = options.get("max_age_days")
        if max_age_days is not None and max_age_days < 0:
            raise CommandError("--max-age-days must be zero or positive.")

        cache = ResponseCache()
        count = cache.sweep(max_age_days)
        days = cache.settings.max_age_days if max_age_days is None else max_age_days
        self.stdout.write(
            self.style.SUCCESS(f"Removed {count} cached responses older than {days} days.")
        )
