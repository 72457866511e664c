from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

User = get_user_model()


class Command(BaseCommand):
    help = "Creates the default admin account if no admin exists yet"

    def add_arguments(self, parser):
        parser.add_argument("--email", default=None)
        parser.add_argument("--password", default=None)
        parser.add_argument("--name", default=None)

    def handle(self, *args, **options):
        if User.objects.filter(role=User.ROLE_ADMIN).exists():
            self.stdout.write("Admin account already exists, nothing to do.")
            return

        email = options["email"] or settings.DEFAULT_ADMIN_EMAIL
        password = options["password"] or settings.DEFAULT_ADMIN_PASSWORD
        name = options["name"] or settings.DEFAULT_ADMIN_NAME

        if not password:
            raise CommandError(
                "No password given. Pass --password or set DEFAULT_ADMIN_PASSWORD."
            )

        user = User.objects.create_user(
            username=email.split("@")[0],
            email=email,
            password=password,
            name=name,
            role=User.ROLE_ADMIN,
            is_staff=True,
        )
        self.stdout.write(self.style.SUCCESS(f"Created admin {user.email}"))
