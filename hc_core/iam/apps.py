# hc_core/iam/apps.py
from django.apps import AppConfig


class IamConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "hc_core.iam"

    def ready(self) -> None:
        # registers the OpenAPI auth scheme
        from hc_core.iam import openapi  # noqa: F401
