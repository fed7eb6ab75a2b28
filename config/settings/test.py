# config/settings/test.py
from .base import *  # noqa

DEBUG = False
SECRET_KEY = "test-secret-key-for-hs256-signing-only"
SIMPLE_JWT["SIGNING_KEY"] = SECRET_KEY
SIMPLE_JWT["ALGORITHM"] = "HS256"
SIMPLE_JWT["JWK_URL"] = None

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

HC_NOTIFICATION_BATCH_SIZE = 2
