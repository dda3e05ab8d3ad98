"""
Root pytest configuration for the Django project.

Sets the environment the settings module reads before Django is
configured, so the suite runs against in-memory SQLite and a local-memory
cache without any external services.
"""

import os
import tempfile

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://:memory:")
os.environ.setdefault("CACHE_URL", "locmemcache://")
os.environ.setdefault("SECURE_SSL_REDIRECT", "False")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "")
os.environ.setdefault("STRIPE_WEBHOOK_TRUST_UNSIGNED", "True")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "rentpay-test-logs"))
