import os

# DJANGO_SETTINGS_ENV=production selects the hardened overlay; anything else
# (including unset) runs the development settings used by tests and the CLI
SETTINGS_ENV = os.getenv("DJANGO_SETTINGS_ENV", "development").strip().lower()

if SETTINGS_ENV == "production":
    from .production import *
else:
    from .development import *
