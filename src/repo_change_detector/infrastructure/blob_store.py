"""PostgreSQL-backed object store holding snapshot blobs."""

import logging
import os
from typing import Optional, Type

import psycopg2
from psycopg2.pool import ThreadedConnectionPool

from repo_change_detector.domain.errors import ChangeDetectorError

logger = logging.getLogger(__name__)


class StoreReadError(ChangeDetectorError):
    """Raised when a blob cannot be read from the store."""
    pass


class StoreWriteError(ChangeDetectorError):
    """Raised when a blob cannot be written to the store."""
    pass


class PostgresBlobStore:
    """Key/object store addressed by container and blob name."""

    def __init__(self, connection_string: Optional[str] = None):
        """
        Initialize blob store.

        Args:
            connection_string: PostgreSQL connection string. If None, uses STORAGE_CONNECTION_STRING env var.
        """
        if connection_string is None:
            connection_string = os.getenv("STORAGE_CONNECTION_STRING")

        self.connection_string = connection_string
        self.pool: Optional[ThreadedConnectionPool] = None

    def connect(self):
        """
        Initialize connection pool.

        Raises:
            ChangeDetectorError: If no connection string is configured
            psycopg2.Error: If the pool cannot be created
        """
        if not self.connection_string:
            raise ChangeDetectorError("STORAGE_CONNECTION_STRING is not set")
        self.pool = ThreadedConnectionPool(1, 2, self.connection_string)
        logger.info("Blob store connection pool created")

    def close(self):
        """Close connection pool."""
        if self.pool:
            self.pool.closeall()
            self.pool = None
            logger.info("Blob store connection pool closed")

    def _get_connection(self, error_class: Type[ChangeDetectorError]):
        """Get a connection from the pool, raising error_class if none is available."""
        if not self.connection_string:
            raise error_class("STORAGE_CONNECTION_STRING is not set")
        try:
            if not self.pool:
                self.connect()
            return self.pool.getconn()
        except psycopg2.Error as e:
            raise error_class(f"Cannot connect to blob store: {e}") from e

    def _return_connection(self, conn):
        """Return a connection to the pool."""
        if self.pool:
            self.pool.putconn(conn)

    @staticmethod
    def _rollback(conn):
        # A dropped connection cannot be rolled back
        if not conn.closed:
            conn.rollback()

    def initialize_schema(self):
        """Create the blobs table if it doesn't exist."""
        conn = self._get_connection(StoreWriteError)
        try:
            with conn.cursor() as cur:
                cur.execute("""
                    CREATE TABLE IF NOT EXISTS blobs (
                        container VARCHAR(255) NOT NULL,
                        blob_name VARCHAR(1024) NOT NULL,
                        content BYTEA NOT NULL,
                        updated_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
                        PRIMARY KEY (container, blob_name)
                    );
                """)
                conn.commit()
                logger.info("Blob store schema initialized")
        except psycopg2.Error as e:
            self._rollback(conn)
            raise StoreWriteError(f"Error initializing blob store schema: {e}") from e
        finally:
            self._return_connection(conn)

    def read_text(self, container: str, blob_name: str) -> Optional[str]:
        """
        Read a blob as UTF-8 text.

        Returns:
            The blob content, or None if the blob does not exist

        Raises:
            StoreReadError: If the store is unreachable, the query fails, or
                the content is not valid UTF-8
        """
        conn = self._get_connection(StoreReadError)
        try:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT content FROM blobs WHERE container = %s AND blob_name = %s",
                    (container, blob_name)
                )
                row = cur.fetchone()
            self._rollback(conn)
        except psycopg2.Error as e:
            self._rollback(conn)
            raise StoreReadError(f"Error reading {container}/{blob_name}: {e}") from e
        finally:
            self._return_connection(conn)

        if row is None:
            return None
        try:
            return bytes(row[0]).decode("utf-8")
        except UnicodeDecodeError as e:
            raise StoreReadError(f"{container}/{blob_name} is not valid UTF-8: {e}") from e

    def write_text(self, container: str, blob_name: str, text: str):
        """
        Overwrite a blob with UTF-8 encoded text.

        There is no version check; the last writer wins.

        Raises:
            StoreWriteError: If the store is unreachable or the write fails
        """
        conn = self._get_connection(StoreWriteError)
        try:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO blobs (container, blob_name, content)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (container, blob_name)
                    DO UPDATE SET
                        content = EXCLUDED.content,
                        updated_at = CURRENT_TIMESTAMP
                    """,
                    (container, blob_name, psycopg2.Binary(text.encode("utf-8")))
                )
                conn.commit()
                logger.info(f"Wrote {container}/{blob_name}")
        except psycopg2.Error as e:
            self._rollback(conn)
            raise StoreWriteError(f"Error writing {container}/{blob_name}: {e}") from e
        finally:
            self._return_connection(conn)
