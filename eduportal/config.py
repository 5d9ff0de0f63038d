"""
Configuration management for the eduportal backend.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Base paths
BASE_DIR = Path(__file__).parent.parent
PACKAGE_DIR = Path(__file__).parent

# Supabase project credentials (passed straight through to the client)
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY", "")

# Server configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
DEBUG = os.getenv("DEBUG", "0") == "1"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Collections in the document store
USERS_COLLECTION = "users"
CONTENT_COLLECTION = "assignments"
SCORES_COLLECTION = "scores"

# Semester tags. Content without a semester is visible to everyone.
SEMESTERS = ["sem-1", "sem-2", "sem-3", "sem-4", "sem-5", "sem-6", "sem-7", "sem-8"]
DEFAULT_SEMESTER = "sem-1"

ROLE_ADMIN = "admin"
ROLE_STUDENT = "student"


def _parse_email_list(raw):
    """Split a comma-separated env value into lowercase emails."""
    return [e.strip().lower() for e in (raw or "").split(",") if e.strip()]


class Config:
    """Application configuration class."""

    def __init__(self):
        self.supabase_url = SUPABASE_URL
        self.supabase_anon_key = SUPABASE_ANON_KEY
        self.supabase_service_key = SUPABASE_SERVICE_KEY
        self.admin_emails = _parse_email_list(os.getenv("ADMIN_EMAILS", ""))
        self.default_semester = DEFAULT_SEMESTER

    def to_dict(self):
        return {
            "supabase_url": self.supabase_url,
            "admin_emails": list(self.admin_emails),
            "default_semester": self.default_semester,
        }

    def update(self, data: dict):
        for key, value in data.items():
            if hasattr(self, key):
                setattr(self, key, value)


# Global config instance
config = Config()
