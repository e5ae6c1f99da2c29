"""
Management command to link (or unlink) two profiles as partners.

Usage:
    python manage.py link_partners alice@example.com bob@example.com
    python manage.py link_partners alice@example.com bob@example.com --unlink
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from journal.models import Profile


class Command(BaseCommand):
    help = 'Links two profiles as partners, in both directions'

    def add_arguments(self, parser):
        parser.add_argument('email_a', help='Email of the first partner')
        parser.add_argument('email_b', help='Email of the second partner')
        parser.add_argument(
            '--unlink',
            action='store_true',
            help='Clear the link between the two profiles instead',
        )

    def handle(self, *args, **options):
        email_a = options['email_a'].strip().lower()
        email_b = options['email_b'].strip().lower()
        if email_a == email_b:
            raise CommandError('A profile cannot be its own partner.')

        first = self.get_profile(email_a)
        second = self.get_profile(email_b)

        with transaction.atomic():
            if options['unlink']:
                if first.partner_id != second.id and second.partner_id != first.id:
                    self.stdout.write(self.style.WARNING(
                        f'{first.name} and {second.name} are not linked'
                    ))
                    return
                first.unlink()
                second.refresh_from_db()
                if second.partner_id == first.id:
                    second.unlink()
                self.stdout.write(self.style.SUCCESS(
                    f'Unlinked {first.name} and {second.name}'
                ))
                return

            for profile, other in ((first, second), (second, first)):
                if profile.partner_id and profile.partner_id != other.id:
                    raise CommandError(
                        f'{profile.name} is already linked to {profile.partner.name}. '
                        f'Unlink them first.'
                    )
            first.link(second)

        self.stdout.write(self.style.SUCCESS(f'Linked {first.name} and {second.name}'))

    def get_profile(self, email):
        profile = Profile.objects.select_related('partner').filter(user__username=email).first()
        if profile is None:
            raise CommandError(f'No profile for {email}')
        return profile
