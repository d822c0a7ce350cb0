"""
Branch filters. The branch is always passed explicitly as ?branch=<id>.
"""
from rest_framework import filters

from core.exceptions import ValidationError


def get_branch_id(request, required=True):
    """Read the branch id from the query string (or body for writes)"""
    value = request.query_params.get('branch')
    if value in (None, '') and hasattr(request, 'data'):
        value = request.data.get('branch')
    if value in (None, ''):
        if required:
            raise ValidationError(message="branch is required", code="BRANCH_REQUIRED")
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(message="branch must be an integer id", code="INVALID_BRANCH")


class BranchFilterBackend(filters.BaseFilterBackend):
    """
    Filter queryset to the branch given in ?branch=, when present
    """
    branch_field = 'branch_id'

    def filter_queryset(self, request, queryset, view):
        """Filter by branch"""
        branch_id = get_branch_id(request, required=False)
        if branch_id is None:
            return queryset
        field = getattr(view, 'branch_field', self.branch_field)
        return queryset.filter(**{field: branch_id})
