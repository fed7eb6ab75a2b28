# config/settings/base.py
from pathlib import Path
import os
from dotenv import load_dotenv
from datetime import timedelta

from django.core.exceptions import ImproperlyConfigured


BASE_DIR = Path(__file__).resolve().parent.parent.parent
load_dotenv(BASE_DIR / ".env")

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "unsafe-dev-key")
DEBUG = os.getenv("DJANGO_DEBUG", "0") == "1"
ALLOWED_HOSTS = ["*"]

INSTALLED_APPS = [
    # Django
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # Third-party
    "corsheaders",
    "rest_framework",
    "drf_spectacular",
    "django_filters",

    # Domain apps
    "hc_core.common.apps.CommonConfig",
    "hc_core.tenants",
    "hc_core.iam.apps.IamConfig",
    "hc_core.patients",
    "hc_core.shifts",
    "hc_core.visits.apps.VisitsConfig",
    "hc_core.audit",
    "hc_core.notifications.apps.NotificationsConfig",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]


ROOT_URLCONF = "config.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    }
]

WSGI_APPLICATION = "config.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("DB_NAME", "hc"),
        "USER": os.getenv("DB_USER", "hc"),
        "PASSWORD": os.getenv("DB_PASSWORD", "hc"),
        "HOST": os.getenv("DB_HOST", "127.0.0.1"),
        "PORT": os.getenv("DB_PORT", "5432"),
    }
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "America/Bogota"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

REST_FRAMEWORK = {
    # Identities come from the external user pool; the API only verifies tokens.
    "DEFAULT_AUTHENTICATION_CLASSES": (
        "hc_core.iam.auth.ClaimsJWTAuthentication",
    ),
    "DEFAULT_PERMISSION_CLASSES": (
        "rest_framework.permissions.IsAuthenticated",
    ),
    "DEFAULT_SCHEMA_CLASS": "drf_spectacular.openapi.AutoSchema",

    # Standard error envelope
    "EXCEPTION_HANDLER": "hc_core.common.api.exceptions.api_exception_handler",

    "DEFAULT_FILTER_BACKENDS": [
        "django_filters.rest_framework.DjangoFilterBackend",
        "rest_framework.filters.OrderingFilter",
    ],

    "DEFAULT_PAGINATION_CLASS": "hc_core.common.api.pagination.DefaultPagination",
}

SPECTACULAR_SETTINGS = {
    "TITLE": "Home Care Visits API",
    "DESCRIPTION": "Clinical visit workflow: draft, submit, review, family publishing",
    "VERSION": "0.1.0",
    "COMPONENT_SPLIT_REQUEST": True,
    "SORT_OPERATIONS": True,
    "SECURITY": [
        {"BearerOrCookieJWT": []}
    ],
}

# Tokens are issued by the identity provider (e.g. a Cognito user pool).
# Set JWT_ALGORITHM=RS256 + JWT_JWK_URL in production to verify against its JWKS.
SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(minutes=60),
    "ALGORITHM": os.getenv("JWT_ALGORITHM", "HS256"),
    "SIGNING_KEY": os.getenv("JWT_SIGNING_KEY", SECRET_KEY),
    "JWK_URL": os.getenv("JWT_JWK_URL") or None,
    "AUDIENCE": os.getenv("JWT_AUDIENCE") or None,
    "ISSUER": os.getenv("JWT_ISSUER") or None,
    "AUTH_HEADER_TYPES": ("Bearer",),
    "USER_ID_CLAIM": "sub",
    "TOKEN_TYPE_CLAIM": "token_use",
    "TOKEN_USER_CLASS": "rest_framework_simplejwt.models.TokenUser",

    # Cookie fallback for the web portal
    "AUTH_COOKIE": "hc_access",
}

# Claim names carried by the identity provider's access tokens
HC_TENANT_CLAIM = os.getenv("HC_TENANT_CLAIM", "custom:tenantId")
HC_ROLES_CLAIM = os.getenv("HC_ROLES_CLAIM", "cognito:groups")

# Notification fan-out
HC_NOTIFICATION_BATCH_SIZE = int(os.getenv("HC_NOTIFICATION_BATCH_SIZE", "100"))
HC_MAX_FAMILY_RECIPIENTS = int(os.getenv("HC_MAX_FAMILY_RECIPIENTS", "200"))
if HC_NOTIFICATION_BATCH_SIZE < 1 or HC_MAX_FAMILY_RECIPIENTS < 1:
    raise ImproperlyConfigured("HC_NOTIFICATION_BATCH_SIZE and HC_MAX_FAMILY_RECIPIENTS must be at least 1")

CORS_ALLOW_ALL_ORIGINS = True  # Only for development!
CORS_ALLOW_CREDENTIALS = True

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {
            "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "plain",
        },
    },
    "loggers": {
        "hc_core": {
            "handlers": ["console"],
            "level": os.getenv("HC_LOG_LEVEL", "INFO"),
            "propagate": True,
        },
    },
}
