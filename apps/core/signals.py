"""
Change notifications for policy data.

policy_changed is the subscription point for anything that must react to a
policy or follow-up write (dashboard cache invalidation, client SMS, a future
push channel to the dashboard). Senders fire it after the transaction
commits, with keyword arguments:

- policy_id: primary key of the policy that changed
- action: one of ACTIONS
"""

from django.db import transaction
from django.dispatch import Signal

ACTION_CREATED = 'created'
ACTION_UPDATED = 'updated'
ACTION_DELETED = 'deleted'
ACTION_RENEWED = 'renewed'
ACTION_FOLLOWUP = 'followup'
ACTION_IMPORTED = 'imported'

ACTIONS = (
    ACTION_CREATED,
    ACTION_UPDATED,
    ACTION_DELETED,
    ACTION_RENEWED,
    ACTION_FOLLOWUP,
    ACTION_IMPORTED,
)

policy_changed = Signal()


def notify_policy_changed(sender, policy_id, action):
    """Send policy_changed once the surrounding transaction commits."""
    transaction.on_commit(
        lambda: policy_changed.send(sender=sender, policy_id=policy_id, action=action)
    )
