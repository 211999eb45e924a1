import django.contrib.auth.models
import django.contrib.auth.validators
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='Company',
            fields=[
                ('address_street', models.CharField(blank=True, max_length=200)),
                ('address_city', models.CharField(blank=True, max_length=100)),
                ('address_province', models.CharField(blank=True, max_length=50)),
                ('address_postal_code', models.CharField(blank=True, max_length=4, validators=[django.core.validators.RegexValidator(message='Postal code must be exactly 4 digits.', regex='^\\d{4}$')])),
                ('address_country', models.CharField(blank=True, default='South Africa', max_length=50)),
                ('created_on', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('created_by', models.CharField(blank=True, max_length=100)),
                ('updated_date', models.DateTimeField(blank=True, null=True)),
                ('updated_by', models.CharField(blank=True, max_length=100)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('registration_number', models.CharField(max_length=50)),
                ('contact_number', models.CharField(max_length=20, validators=[django.core.validators.RegexValidator(message='Enter a valid phone number (e.g. +27821234567).', regex='^\\+?[1-9]\\d{1,14}$')])),
                ('email', models.EmailField(max_length=256)),
                ('website', models.CharField(blank=True, max_length=200, validators=[django.core.validators.RegexValidator(message='Enter a valid website address.', regex='^(https?://)?([\\w\\-]+\\.)+[\\w\\-]+(/[\\w\\-]*)*/?$')])),
                ('vat_number', models.CharField(blank=True, max_length=50)),
                ('is_active', models.BooleanField(default=True)),
                ('is_removed', models.BooleanField(default=False)),
                ('removed_date', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'Company',
                'verbose_name_plural': 'Companies',
                'db_table': 'companies',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Branch',
            fields=[
                ('address_street', models.CharField(blank=True, max_length=200)),
                ('address_city', models.CharField(blank=True, max_length=100)),
                ('address_province', models.CharField(blank=True, max_length=50)),
                ('address_postal_code', models.CharField(blank=True, max_length=4, validators=[django.core.validators.RegexValidator(message='Postal code must be exactly 4 digits.', regex='^\\d{4}$')])),
                ('address_country', models.CharField(blank=True, default='South Africa', max_length=50)),
                ('created_on', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('created_by', models.CharField(blank=True, max_length=100)),
                ('updated_date', models.DateTimeField(blank=True, null=True)),
                ('updated_by', models.CharField(blank=True, max_length=100)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('contact_number', models.CharField(blank=True, max_length=20, validators=[django.core.validators.RegexValidator(message='Enter a valid phone number (e.g. +27821234567).', regex='^\\+?[1-9]\\d{1,14}$')])),
                ('email', models.EmailField(blank=True, max_length=256)),
                ('is_head_office', models.BooleanField(default=False)),
                ('is_active', models.BooleanField(default=True)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='branches', to='accounts.company')),
            ],
            options={
                'verbose_name': 'Branch',
                'verbose_name_plural': 'Branches',
                'db_table': 'branches',
                'ordering': ['company__name', 'name'],
            },
        ),
        migrations.CreateModel(
            name='ApplicationUser',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('role', models.CharField(choices=[('system_administrator', 'System Administrator'), ('property_manager', 'Property Manager'), ('financial_officer', 'Financial Officer'), ('tenant_officer', 'Tenant Officer'), ('reports_viewer', 'Reports Viewer'), ('branch_manager', 'Branch Manager'), ('company_administrator', 'Company Administrator')], default='reports_viewer', max_length=30)),
                ('last_login_ip', models.GenericIPAddressField(blank=True, null=True)),
                ('branch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='users', to='accounts.branch')),
                ('company', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='users', to='accounts.company')),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'User',
                'verbose_name_plural': 'Users',
                'db_table': 'application_users',
                'ordering': ['username'],
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='Email',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_on', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('created_by', models.CharField(blank=True, max_length=100)),
                ('updated_date', models.DateTimeField(blank=True, null=True)),
                ('updated_by', models.CharField(blank=True, max_length=100)),
                ('related_entity_type', models.CharField(choices=[('User', 'User'), ('Company', 'Company'), ('Branch', 'Branch')], max_length=20)),
                ('related_entity_id', models.CharField(max_length=50)),
                ('email_address', models.EmailField(max_length=256)),
                ('description', models.CharField(blank=True, max_length=50)),
                ('is_primary', models.BooleanField(default=False)),
                ('is_active', models.BooleanField(default=True)),
                ('branch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='email_addresses', to='accounts.branch')),
                ('company', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='email_addresses', to='accounts.company')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='email_addresses', to='accounts.applicationuser')),
            ],
            options={
                'verbose_name': 'Email Address',
                'verbose_name_plural': 'Email Addresses',
                'db_table': 'emails',
                'ordering': ['-is_primary', 'email_address'],
                'indexes': [models.Index(fields=['related_entity_type', 'related_entity_id'], name='emails_related_entity_idx')],
            },
        ),
        migrations.CreateModel(
            name='ContactNumber',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_on', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('created_by', models.CharField(blank=True, max_length=100)),
                ('updated_date', models.DateTimeField(blank=True, null=True)),
                ('updated_by', models.CharField(blank=True, max_length=100)),
                ('related_entity_type', models.CharField(choices=[('User', 'User'), ('Company', 'Company'), ('Branch', 'Branch')], max_length=20)),
                ('related_entity_id', models.CharField(max_length=50)),
                ('number', models.CharField(max_length=20, validators=[django.core.validators.RegexValidator(message='Enter a valid phone number (e.g. +27821234567).', regex='^\\+?[1-9]\\d{1,14}$')])),
                ('type', models.CharField(choices=[('mobile', 'Mobile'), ('landline', 'Landline'), ('fax', 'Fax'), ('whatsapp', 'WhatsApp'), ('other', 'Other')], default='mobile', max_length=20)),
                ('description', models.CharField(blank=True, max_length=50)),
                ('is_primary', models.BooleanField(default=False)),
                ('is_active', models.BooleanField(default=True)),
                ('branch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='contact_numbers', to='accounts.branch')),
                ('company', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='contact_numbers', to='accounts.company')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='contact_numbers', to='accounts.applicationuser')),
            ],
            options={
                'verbose_name': 'Contact Number',
                'verbose_name_plural': 'Contact Numbers',
                'db_table': 'contact_numbers',
                'ordering': ['-is_primary', 'number'],
                'indexes': [models.Index(fields=['related_entity_type', 'related_entity_id'], name='contact_numbers_related_idx')],
            },
        ),
    ]
