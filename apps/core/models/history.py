"""
Closed policy terms.
"""

from django.db import models

from .base import TimeStampedModel


class PolicyHistory(TimeStampedModel):
    """
    One finished term of a policy.

    Rows are written when a term lapses (daily expiry sweep, renewed_date
    empty) and when it is renewed (renewed_date set). A term is identified by
    its expiry date, so the sweep and a later renewal update the same row.
    """

    policy = models.ForeignKey(
        'core.Policy',
        on_delete=models.CASCADE,
        related_name='terms',
    )

    expiry_date = models.DateField(
        db_index=True,
        help_text="Expiry date of the closed term"
    )

    renewed_date = models.DateField(
        null=True,
        blank=True,
        db_index=True,
        help_text="When the term was renewed; empty while still lapsed"
    )

    class Meta:
        verbose_name = 'Policy history'
        verbose_name_plural = 'Policy history'
        ordering = ['-expiry_date', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['policy', 'expiry_date'],
                name='unique_policy_term_expiry',
            ),
        ]

    def __str__(self):
        return f"{self.policy_id} term ending {self.expiry_date}"

    @property
    def is_renewed(self):
        return self.renewed_date is not None
