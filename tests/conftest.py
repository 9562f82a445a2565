"""Pytest configuration: test settings must be in the environment before app modules are imported."""

import os

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["JWT_TOKEN_TTL_SECONDS"] = "3600"
# Lowest bcrypt cost keeps the suite fast.
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
