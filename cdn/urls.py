"""
URL configuration for the cdn app.

Included by the main project URLs:

Proxy Endpoints (/api/cdn/, API key required):
- upload/                 - multipart upload (POST)
- delete/?path=           - delete a file (DELETE)
- rename/                 - rename a file (POST)
- details/?path=          - file details (GET)
- files/                  - list files (GET)
- view/?path=             - redirect to the stored file (GET)
- categories/             - list categories (GET)
- folders/?category=      - list folders (GET)
- folder/                 - create (POST) or delete (DELETE) a folder
- folder/rename/          - rename a folder (POST)
- move/                   - move files between folders (POST)
- maintenance/clean/      - clean orphaned files (POST)
- maintenance/clearcache/ - clear the upstream cache (POST)

Diagnostics (/api/cdn-debug/):
- ping/                   - liveness, no API key needed (GET)
- test-connection/        - upstream ping summary (GET)

Every route accepts the path with or without a trailing slash.
"""

from django.urls import re_path

from . import views

app_name = 'cdn'

urlpatterns = [
    re_path(r'^upload/?$', views.upload, name='upload'),
    re_path(r'^delete/?$', views.delete, name='delete'),
    re_path(r'^rename/?$', views.rename, name='rename'),
    re_path(r'^details/?$', views.details, name='details'),
    re_path(r'^files/?$', views.files, name='files'),
    re_path(r'^view/?$', views.view, name='view'),
    re_path(r'^categories/?$', views.categories, name='categories'),
    re_path(r'^folders/?$', views.folders, name='folders'),
    re_path(r'^folder/rename/?$', views.rename_folder, name='folder-rename'),
    re_path(r'^folder/?$', views.folder, name='folder'),
    re_path(r'^move/?$', views.move, name='move'),
    re_path(r'^maintenance/clean/?$', views.maintenance_clean, name='maintenance-clean'),
    re_path(r'^maintenance/clearcache/?$', views.maintenance_clearcache, name='maintenance-clearcache'),
]

debug_urlpatterns = [
    re_path(r'^ping/?$', views.debug_ping, name='debug-ping'),
    re_path(r'^test-connection/?$', views.debug_test_connection, name='debug-test-connection'),
]
