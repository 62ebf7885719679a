"""Configuration constants for the kidpoints web service."""
from __future__ import annotations

import os
from typing import Tuple

from dotenv import load_dotenv

load_dotenv()

STORE_BACKENDS: Tuple[str, ...] = ("json", "sqlite")
STORE_BACKEND = os.environ.get("KIDPOINTS_STORE", "json").strip().lower()
DATA_FILE = os.environ.get("KIDPOINTS_DATA_FILE", "data.json")
SQLITE_FILE_NAME = os.environ.get("KIDPOINTS_SQLITE", "kidpoints.db")
HOST = os.environ.get("KIDPOINTS_HOST", "127.0.0.1")
PORT = int(os.environ.get("KIDPOINTS_PORT", "3002"))
CORS_ORIGINS: Tuple[str, ...] = tuple(
    origin.strip() for origin in os.environ.get("KIDPOINTS_CORS_ORIGINS", "*").split(",") if origin.strip()
)
LOG_FILE = os.environ.get("KIDPOINTS_LOG_FILE") or None

__all__ = [
    "STORE_BACKENDS",
    "STORE_BACKEND",
    "DATA_FILE",
    "SQLITE_FILE_NAME",
    "HOST",
    "PORT",
    "CORS_ORIGINS",
    "LOG_FILE",
]
