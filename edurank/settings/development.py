import os

from .base import *

# Development specific settings
DEBUG = True

ALLOWED_HOSTS = ["localhost", "127.0.0.1"]

# Score small catalogs inline so breakpoints inside factor calculators work
# RANKING_ENGINE["PARALLEL_THRESHOLD"] = 10_000

LOGGING["loggers"]["apps.ranking"]["level"] = os.getenv("LOG_LEVEL", "DEBUG").upper()
