import logging
import os
from typing import Iterable, List

from tinydb import Query, TinyDB

from mediaparse.models import ArticleRecord


logger = logging.getLogger(__name__)


class ArticleStorage:
    """
    TinyDB-backed article store.

    Records are keyed by ``content_hash``; saving a record whose hash is
    already stored is a no-op.
    """

    def __init__(self, db_path: str, table_name: str = "articles"):
        directory = os.path.dirname(os.path.abspath(db_path))
        os.makedirs(directory, exist_ok=True)
        self.db_path = db_path
        self.db = TinyDB(db_path)
        self.table = self.db.table(table_name)
        self._hashes = {
            doc.get("content_hash") for doc in self.table.all() if doc.get("content_hash")
        }
        logger.debug(f"Loaded {len(self._hashes)} stored article hashes from {db_path}")

    def has_hash(self, content_hash: str) -> bool:
        return content_hash in self._hashes

    def save(self, records: Iterable[ArticleRecord]) -> int:
        """Insert records not stored yet; return how many were inserted."""
        new_docs = []
        for record in records:
            if record.content_hash in self._hashes:
                logger.debug(f"Skipping stored article: {record.url}")
                continue
            self._hashes.add(record.content_hash)
            new_docs.append(record.model_dump(mode="json"))

        if new_docs:
            self.table.insert_multiple(new_docs)
        logger.info(f"Stored {len(new_docs)} new articles in {self.db_path}")
        return len(new_docs)

    def get_all(self) -> List[dict]:
        return self.table.all()

    def get_by_url(self, url: str) -> List[dict]:
        return self.table.search(Query().url == url)

    def count_records(self) -> int:
        return len(self.table)

    def close(self) -> None:
        self.db.close()
