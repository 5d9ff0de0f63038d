"""
eduportal Backend Package
=========================

Flask backend for a small education portal: students sign in, take
assignments and quizzes for their semester, and get scored; admins
author content and read class analytics. Supabase provides auth and
storage.

Structure:
- routes/: API route blueprints
- services/: content parsing, grading, analytics, store and identity clients
- models.py: data contracts for question sets and score records
- roles.py: admin/student role resolution
- config.py: Configuration management
"""

from .config import config, Config

__version__ = "1.0.0"

__all__ = ['config', 'Config']
