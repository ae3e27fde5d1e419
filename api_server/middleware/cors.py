"""CORS configuration"""

import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


def parse_origins(value: str) -> list[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def setup_cors(app: FastAPI) -> None:
    """Configure CORS middleware

    Reads ALLOWED_ORIGINS (comma separated) from the environment. Without it
    every origin is allowed, which suits local frontend development.
    """
    origins = parse_origins(os.getenv("ALLOWED_ORIGINS", ""))

    # Credentials cannot be combined with a wildcard origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins or ["*"],
        allow_credentials=bool(origins),
        allow_methods=ALLOWED_METHODS,
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
