import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='CdnCategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=50, unique=True)),
                ('display_name', models.CharField(max_length=100)),
                ('allowed_file_types', models.CharField(default='*', help_text="'*' or a comma-separated list of extensions, e.g. '.pdf,.docx'", max_length=500)),
                ('is_active', models.BooleanField(default=True)),
            ],
            options={
                'verbose_name': 'CDN Category',
                'verbose_name_plural': 'CDN Categories',
                'db_table': 'cdn_categories',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='CdnFileMetadata',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('file_name', models.CharField(max_length=255)),
                ('original_file_name', models.CharField(max_length=255)),
                ('url', models.CharField(max_length=1000, unique=True)),
                ('category', models.CharField(default='documents', max_length=50)),
                ('folder', models.CharField(blank=True, max_length=500)),
                ('content_type', models.CharField(blank=True, max_length=100)),
                ('file_size', models.BigIntegerField(default=0)),
                ('uploaded_by', models.CharField(blank=True, max_length=150)),
                ('uploaded_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('is_deleted', models.BooleanField(default=False)),
                ('deleted_at', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'verbose_name': 'CDN File',
                'verbose_name_plural': 'CDN Files',
                'db_table': 'cdn_file_metadata',
                'ordering': ['-uploaded_at'],
                'indexes': [models.Index(fields=['category', 'folder'], name='cdn_files_category_idx')],
            },
        ),
        migrations.CreateModel(
            name='CdnAccessLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action_type', models.CharField(max_length=50)),
                ('path', models.CharField(blank=True, max_length=1000)),
                ('status_code', models.PositiveSmallIntegerField()),
                ('is_success', models.BooleanField(default=False)),
                ('error_message', models.TextField(blank=True)),
                ('username', models.CharField(blank=True, max_length=150)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('timestamp', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'CDN Access Log',
                'verbose_name_plural': 'CDN Access Logs',
                'db_table': 'cdn_access_logs',
                'ordering': ['-timestamp'],
                'indexes': [models.Index(fields=['action_type', 'timestamp'], name='cdn_logs_action_idx'),],
            },
        ),
    ]
