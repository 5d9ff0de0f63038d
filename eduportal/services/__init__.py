"""
eduportal Services
==================

Business logic services for the portal.

Services:
- content_parser: pasted text to assignment/quiz questions
- content_service: creating and listing question sets
- grading_service: scoring a submission against a question set
- submission_service: grade-and-record for one attempt
- analytics: dashboard, roster and profile aggregates
- document_store / identity: Supabase storage and auth clients
"""

# Services are imported directly when needed to avoid circular imports
# Example: from eduportal.services.grading_service import grade_submission

__all__ = [
    'content_parser',
    'content_service',
    'grading_service',
    'submission_service',
    'analytics',
    'document_store',
    'identity',
]
