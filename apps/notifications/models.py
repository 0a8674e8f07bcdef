from decimal import Decimal

from django.db import models


class SmsLog(models.Model):
    """
    One outbound SMS as reported by the provider.

    Rows are never edited apart from ``is_read``, which drives the unread
    badge of the notifications panel.
    """

    STATUS_SUCCESS = 'Success'
    STATUS_FAILED = 'failed'

    phone_number = models.CharField(max_length=32, db_index=True)
    message = models.TextField()
    message_id = models.CharField(max_length=100, blank=True)
    cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    delivery_status = models.CharField(max_length=50, blank=True)

    is_read = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'notifications_sms_log'
        verbose_name = 'SMS log'
        verbose_name_plural = 'SMS logs'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.phone_number} - {self.delivery_status or 'pending'}"

    @property
    def is_success(self):
        return self.delivery_status == self.STATUS_SUCCESS

    def mark_as_read(self):
        if not self.is_read:
            self.is_read = True
            self.save(update_fields=['is_read'])

    def mark_as_unread(self):
        if self.is_read:
            self.is_read = False
            self.save(update_fields=['is_read'])
