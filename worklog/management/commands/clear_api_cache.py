from django.core.management.base import BaseCommand, CommandError

from worklog.cache.response_cache import ResponseCache


class Command(BaseCommand):
    help = "Clear cached API responses, all of them or those of one route."

    def add_arguments(self, parser):
        parser.add_argument(
            "--route",
            help="Only clear entries whose path contains this value (e.g. api/projects).",
        )

    def handle(self, *args, **options):
        cache = ResponseCache()
        route = options.get("route")
        if route is not None:
            route = route.strip()
            if not route:
                raise CommandError("--route must not be empty.")
            count = cache.clear_route(route)
            self.stdout.write(
                self.style.SUCCESS(f"Cleared {count} cached responses for route '{route}'.")
            )
            return

        count = cache.clear_all()
        self.stdout.write(self.style.SUCCESS(f"Cleared all API cache ({count} entries)."))
