from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Policies'

    def ready(self):
        # Dashboard cache invalidation subscribes to policy_changed
        from . import receivers  # noqa: F401
