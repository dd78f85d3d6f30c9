from django.apps import AppConfig


class CoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
    verbose_name = "Core"

    def ready(self):
        from core.store import build_record_store

        # One store per process, injected into every service.
        self.record_store = build_record_store()
