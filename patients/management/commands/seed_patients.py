"""
Management command to populate the database with sample patients.
"""
import random

from django.core.management.base import BaseCommand, CommandError

from patients.models import Patient
from patients.schemas import PatientInput
from patients.services.patients import PatientService

FIRST_NAMES = ['John', 'Jane', 'Maria', 'Ahmed', 'Wei', 'Olga', 'Kofi', 'Priya', 'Lucas', 'Amara']
LAST_NAMES = ['Doe', 'Smith', 'Garcia', 'Khan', 'Chen', 'Ivanova', 'Mensah', 'Patel', 'Silva', 'Okafor']
CITIES = [
    ('New York', 'NY', '10001'),
    ('Austin', 'TX', '73301'),
    ('Seattle', 'WA', '98101'),
    ('Denver', 'CO', '80201'),
    ('Boston', 'MA', '02108'),
]
STREETS = ['Main Street', 'Oak Avenue', 'Pine Road', 'Maple Drive', 'Cedar Lane']


class Command(BaseCommand):
    help = 'Populate database with sample patients'

    def add_arguments(self, parser):
        parser.add_argument('--count', type=int, default=25, help='number of patients to create')
        parser.add_argument('--clear', action='store_true', help='delete existing patients first')
        parser.add_argument('--seed', type=int, default=None, help='random seed for repeatable data')

    def handle(self, *args, **options):
        count = options['count']
        if count < 0:
            raise CommandError('--count must be non-negative')
        rng = random.Random(options['seed'])

        if options['clear']:
            deleted, _ = Patient.objects.all().delete()
            self.stdout.write(f'Deleted {deleted} existing patients')

        service = PatientService()
        for i in range(count):
            service.create(self.sample_input(rng, i))

        self.stdout.write(self.style.SUCCESS(f'Created {count} patients'))

    @staticmethod
    def sample_input(rng, index):
        first = rng.choice(FIRST_NAMES)
        last = rng.choice(LAST_NAMES)
        city, state, zip_code = rng.choice(CITIES)
        # Every patient gets at least one contact method
        contact = rng.choice(['phone', 'email', 'both'])
        return PatientInput(
            first_name=first,
            last_name=last,
            address=f'{rng.randint(1, 999)} {rng.choice(STREETS)}',
            city=city,
            state=state,
            zip_code=zip_code,
            phone_number=f'+1555{index:07d}' if contact in ('phone', 'both') else None,
            email=f'{first}.{last}.{index}@example.com'.lower() if contact in ('email', 'both') else None,
        )
