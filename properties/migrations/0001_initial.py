import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


ADDRESS_POSTAL_CODE_VALIDATOR = django.core.validators.RegexValidator(message='Postal code must be exactly 4 digits.', regex='^\\d{4}$')
PHONE_VALIDATOR = django.core.validators.RegexValidator(message='Enter a valid phone number (e.g. +27821234567).', regex='^\\+?[1-9]\\d{1,14}$')
ID_NUMBER_VALIDATOR = django.core.validators.RegexValidator(message='ID number must be exactly 13 digits.', regex='^\\d{13}$')
BANK_ACCOUNT_VALIDATOR = django.core.validators.RegexValidator(message='Bank account number must be exactly 10 digits.', regex='^\\d{10}$')
BRANCH_CODE_VALIDATOR = django.core.validators.RegexValidator(message='Branch code must be exactly 6 digits.', regex='^\\d{6}$')
BANK_NAME_CHOICES = [('absa', 'Absa'), ('capitec', 'Capitec'), ('fnb', 'FNB'), ('nedbank', 'Nedbank'), ('standard_bank', 'Standard Bank')]


def address_fields():
    return [
        ('address_street', models.CharField(blank=True, max_length=200)),
        ('address_city', models.CharField(blank=True, max_length=100)),
        ('address_province', models.CharField(blank=True, max_length=50)),
        ('address_postal_code', models.CharField(blank=True, max_length=4, validators=[ADDRESS_POSTAL_CODE_VALIDATOR])),
        ('address_country', models.CharField(blank=True, default='South Africa', max_length=50)),
    ]


def audit_fields():
    return [
        ('created_on', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
        ('created_by', models.CharField(blank=True, max_length=100)),
        ('updated_date', models.DateTimeField(blank=True, null=True)),
        ('updated_by', models.CharField(blank=True, max_length=100)),
    ]


def person_fields():
    return [
        ('first_name', models.CharField(max_length=50)),
        ('last_name', models.CharField(max_length=50)),
        ('id_number', models.CharField(max_length=13, validators=[ID_NUMBER_VALIDATOR])),
        ('email_address', models.EmailField(blank=True, max_length=256)),
        ('is_email_notifications_enabled', models.BooleanField(default=True)),
        ('mobile_number', models.CharField(blank=True, max_length=20, validators=[PHONE_VALIDATOR])),
        ('is_sms_notifications_enabled', models.BooleanField(default=False)),
    ]


def bank_account_fields():
    return [
        ('bank_account_type', models.CharField(blank=True, max_length=100)),
        ('bank_account_number', models.CharField(blank=True, max_length=10, validators=[BANK_ACCOUNT_VALIDATOR])),
        ('bank_name', models.CharField(blank=True, choices=BANK_NAME_CHOICES, max_length=20)),
        ('bank_branch_code', models.CharField(blank=True, max_length=6, validators=[BRANCH_CODE_VALIDATOR])),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('accounts', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PropertyOwner',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *person_fields(),
                *bank_account_fields(),
                *address_fields(),
                *audit_fields(),
                ('vat_number', models.CharField(blank=True, max_length=50)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='property_owners', to='accounts.company')),
            ],
            options={
                'verbose_name': 'Property Owner',
                'verbose_name_plural': 'Property Owners',
                'db_table': 'property_owners',
                'ordering': ['last_name', 'first_name'],
                'indexes': [models.Index(fields=['company', 'last_name'], name='owners_company_name_idx')],
            },
        ),
        migrations.CreateModel(
            name='Property',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *address_fields(),
                *audit_fields(),
                ('rental_amount', models.DecimalField(decimal_places=2, default=0, help_text='Monthly rental in ZAR', max_digits=12, validators=[django.core.validators.MinValueValidator(0)])),
                ('has_tenant', models.BooleanField(default=False)),
                ('lease_original_start_date', models.DateField(blank=True, null=True)),
                ('current_lease_start_date', models.DateField(blank=True, null=True)),
                ('lease_end_date', models.DateField(blank=True, null=True)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='properties', to='accounts.company')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='properties', to='properties.propertyowner')),
            ],
            options={
                'verbose_name': 'Property',
                'verbose_name_plural': 'Properties',
                'db_table': 'properties',
                'ordering': ['address_city', 'address_street'],
                'indexes': [
                    models.Index(fields=['company', 'has_tenant'], name='properties_company_tenant_idx'),
                    models.Index(fields=['lease_end_date'], name='properties_lease_end_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PropertyTenant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                *person_fields(),
                *bank_account_fields(),
                *address_fields(),
                *audit_fields(),
                ('debit_day_of_month', models.PositiveSmallIntegerField(default=1, help_text='Day of the month the rent is debited', validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(31)])),
                ('is_removed', models.BooleanField(default=False)),
                ('removed_date', models.DateTimeField(blank=True, null=True)),
                ('removed_by', models.CharField(blank=True, max_length=100)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='property_tenants', to='accounts.company')),
                ('property', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='tenants', to='properties.property')),
            ],
            options={
                'verbose_name': 'Property Tenant',
                'verbose_name_plural': 'Property Tenants',
                'db_table': 'property_tenants',
                'ordering': ['last_name', 'first_name'],
                'indexes': [models.Index(fields=['company', 'is_removed'], name='tenants_company_removed_idx')],
            },
        ),
        migrations.AddField(
            model_name='property',
            name='current_tenant',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='properties.propertytenant'),
        ),
    ]
