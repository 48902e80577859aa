"""
FastAPI application setup and configuration.
"""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from server.middleware import RequestLoggingMiddleware


# =============================================================================
# Constants
# =============================================================================

API_TITLE = "Gatekeep API"
API_VERSION = "0.1.0"

# Approving a request runs code on this machine, so only local UIs by default
DEFAULT_CORS_ORIGINS = [
    "http://localhost",
    "http://127.0.0.1",
]
DEFAULT_CORS_ORIGIN_REGEX = r"http://(localhost|127\.0\.0\.1)(:\d+)?"


# =============================================================================
# FastAPI App
# =============================================================================

app = FastAPI(title=API_TITLE, version=API_VERSION)


# =============================================================================
# CORS Configuration
# =============================================================================

# CORS_ORIGINS="https://example.com,https://app.example.com" replaces the
# local defaults with an explicit list.
cors_origins_env = os.environ.get("CORS_ORIGINS")
if cors_origins_env:
    cors_origins = [origin.strip() for origin in cors_origins_env.split(",") if origin.strip()]
    cors_origin_regex = None
else:
    cors_origins = DEFAULT_CORS_ORIGINS
    cors_origin_regex = DEFAULT_CORS_ORIGIN_REGEX

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_origin_regex=cors_origin_regex,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

# Request logging middleware (added after CORS so it runs first)
app.add_middleware(RequestLoggingMiddleware)
