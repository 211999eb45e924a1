"""
Django management command to seed the reference data the portal needs.

Safe to run repeatedly: existing rows are left untouched.

Usage:
    python manage.py seed_data
    python manage.py seed_data --with-company --admin-password <password>
"""

import logging
import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import Branch, Company, SystemRole
from cdn.models import DEFAULT_CATEGORY, CdnCategory

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Create the default CDN category and, optionally, a default company with an administrator'

    def add_arguments(self, parser):
        parser.add_argument(
            '--with-company',
            action='store_true',
            help='Also create a default company, head office branch and system administrator',
        )
        parser.add_argument('--company-name', default='Roovia')
        parser.add_argument('--company-email', default='info@roovia.co.za')
        parser.add_argument('--company-phone', default='+27100000000')
        parser.add_argument('--admin-username', default='admin')
        parser.add_argument('--admin-email', default='admin@roovia.co.za')
        parser.add_argument(
            '--admin-password',
            default=os.environ.get('SEED_ADMIN_PASSWORD'),
            help='Defaults to the SEED_ADMIN_PASSWORD environment variable',
        )

    def handle(self, *args, **options):
        with transaction.atomic():
            self.seed_cdn_category()
            if options['with_company']:
                self.seed_company(options)

        self.stdout.write(self.style.SUCCESS("Seeding complete"))

    def seed_cdn_category(self):
        category, created = CdnCategory.objects.get_or_create(
            name=DEFAULT_CATEGORY,
            defaults={'display_name': 'Documents', 'allowed_file_types': '*'},
        )
        self.report('CDN category', category.name, created)

    def seed_company(self, options):
        company = Company.objects.filter(name=options['company_name'], is_removed=False).first()
        created = company is None
        if created:
            company = Company.objects.create(
                name=options['company_name'],
                email=options['company_email'],
                contact_number=options['company_phone'],
                created_by='seed_data',
            )
        self.report('Company', company.name, created)

        branch, created = Branch.objects.get_or_create(
            company=company,
            is_head_office=True,
            defaults={
                'name': 'Head Office',
                'email': options['company_email'],
                'created_by': 'seed_data',
            },
        )
        self.report('Branch', branch.name, created)

        User = get_user_model()
        username = options['admin_username']
        if User.objects.filter(username=username).exists():
            self.report('User', username, False)
            return

        if not options['admin_password']:
            raise CommandError('--admin-password (or SEED_ADMIN_PASSWORD) is required to create the administrator')

        User.objects.create_user(
            username=username,
            email=options['admin_email'],
            password=options['admin_password'],
            company=company,
            branch=branch,
            role=SystemRole.SYSTEM_ADMINISTRATOR,
            is_staff=True,
        )
        self.report('User', username, True)

    def report(self, label, name, created):
        if created:
            logger.info(f"Seeded {label.lower()} {name}")
            self.stdout.write(self.style.SUCCESS(f"  Created {label}: {name}"))
        else:
            self.stdout.write(f"  {label} already exists: {name}")
