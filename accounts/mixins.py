"""
Company scoping and audit stamping shared by the portal's viewsets.
"""

from django.utils import timezone


def sees_all_companies(user):
    """Superusers and system administrators are not bound to one company."""
    return bool(user and user.is_authenticated and user.is_system_administrator)


class CompanyScopedMixin:
    """
    Restricts a viewset's queryset to the caller's company.

    ``company_lookup`` names the path from the model to its company. When the
    model carries its own ``company`` foreign key, records saved by a
    company-bound user are pinned to that user's company.
    """

    company_lookup = 'company'

    def scope_queryset(self, queryset):
        user = self.request.user
        if sees_all_companies(user):
            return queryset
        if not user.company_id:
            return queryset.none()
        return queryset.filter(**{self.company_lookup: user.company_id})

    def get_queryset(self):
        return self.scope_queryset(super().get_queryset())

    def get_audit_username(self):
        return self.request.user.get_username()

    def get_company_kwargs(self):
        user = self.request.user
        if self.company_lookup == 'company' and not sees_all_companies(user):
            return {'company': user.company}
        return {}

    def perform_create(self, serializer):
        serializer.save(created_by=self.get_audit_username(), **self.get_company_kwargs())

    def perform_update(self, serializer):
        serializer.save(
            updated_by=self.get_audit_username(),
            updated_date=timezone.now(),
            **self.get_company_kwargs()
        )
