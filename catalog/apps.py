from django.apps import AppConfig


class CatalogConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "catalog"

    def ready(self):
        from django.conf import settings

        from infrastructure.observability import setup_tracing

        setup_tracing(
            service_name=getattr(settings, "TRACING_SERVICE_NAME", "evershine-catalog"),
            enable=getattr(settings, "TRACING_ENABLED", False),
            console_export=getattr(settings, "TRACING_CONSOLE_EXPORT", False),
        )
