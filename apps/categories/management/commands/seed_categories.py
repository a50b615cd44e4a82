"""
Management command to seed the default categories for one or all users.
"""
from django.core.management.base import BaseCommand

from apps.categories.services import seed_default_categories
from apps.identity.models import User


class Command(BaseCommand):
    help = 'Seeds the default categories (Work, Personal, Shopping, Health) for users'

    def add_arguments(self, parser):
        parser.add_argument(
            '--username',
            type=str,
            help='Username to seed categories for.',
        )
        parser.add_argument(
            '--all',
            action='store_true',
            help='Seed for all active users',
        )

    def handle(self, *args, **options):
        username = options.get('username')
        seed_all = options.get('all')

        if username:
            try:
                users = [User.objects.get(username=username)]
            except User.DoesNotExist:
                self.stderr.write(self.style.ERROR(f'User {username} not found'))
                return
        elif seed_all:
            users = list(User.objects.filter(is_active=True))
        else:
            self.stderr.write(self.style.WARNING('Please provide --username or --all flag'))
            return

        total = 0
        for user in users:
            created = seed_default_categories(user.id)
            total += len(created)
            self.stdout.write(f'  {user.username}: {len(created)} categories created')

        self.stdout.write(self.style.SUCCESS(f'Seeded {total} categories for {len(users)} users'))
