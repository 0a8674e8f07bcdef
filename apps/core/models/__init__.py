"""
Core domain models package.
"""

# Import base models
from .base import (
    TimeStampedModel,
    AuditableModel,
)

# Import domain models
# Note: These imports must be after base imports to avoid circular dependency
from .policy import Policy
from .followup import FollowUp
from .history import PolicyHistory
from .advertisement import Advertisement

__all__ = [
    'TimeStampedModel',
    'AuditableModel',
    'Policy',
    'FollowUp',
    'PolicyHistory',
    'Advertisement',
]
