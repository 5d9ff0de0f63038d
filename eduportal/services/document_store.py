"""
Document store backed by Supabase tables.

Each collection is a table with an `id` primary key. Only the handful of
operations the portal needs are exposed: create, get, list with equality
filters and a single sort column, and delete.
"""
import logging

from supabase import create_client, Client

from ..config import config

logger = logging.getLogger(__name__)


class DocumentStore:
    """Collection-based CRUD over a Supabase client."""

    def __init__(self, client: Client):
        self.client = client

    def create_document(self, collection, fields, doc_id=None):
        """
        Insert a document and return it as stored (including its id).
        With doc_id the row is written under that id, replacing any
        existing row.
        """
        table = self.client.table(collection)
        if doc_id is not None:
            result = table.upsert({**fields, "id": doc_id}).execute()
        else:
            result = table.insert(fields).execute()

        if not result.data:
            raise RuntimeError(f"Failed to save document to '{collection}'")
        return result.data[0]

    def get_document(self, collection, doc_id):
        """Return the document with this id, or None."""
        result = self.client.table(collection).select('*').eq('id', doc_id).limit(1).execute()
        return result.data[0] if result.data else None

    def list_documents(self, collection, filters=None, order_by=None, descending=False):
        query = self.client.table(collection).select('*')
        for field, value in (filters or {}).items():
            query = query.eq(field, value)
        if order_by:
            query = query.order(order_by, desc=descending)
        return query.execute().data or []

    def delete_document(self, collection, doc_id):
        """Delete by id. Returns True if a row was removed."""
        result = self.client.table(collection).delete().eq('id', doc_id).execute()
        return bool(result.data)


_store = None


def get_store() -> DocumentStore:
    """Get or create the shared document store."""
    global _store
    if _store is None:
        url = config.supabase_url
        key = config.supabase_service_key
        if not url or not key:
            raise RuntimeError("Supabase credentials not configured. Check SUPABASE_URL and SUPABASE_SERVICE_KEY in .env")
        _store = DocumentStore(create_client(url, key))
        logger.info("Connected document store to %s", url)
    return _store
