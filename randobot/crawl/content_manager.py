"""
Snapshot persistence for the document store
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from .models import DocumentStore, StoreState


class ContentManager:
    """Load and save the whole DocumentStore as one JSON file"""

    def __init__(self, data_path: Union[str, Path] = "data/website_data.json"):
        self.data_path = Path(data_path)
        self.state = StoreState.EMPTY
        self.logger = logging.getLogger(__name__)

    def _write(self, payload: dict):
        self.data_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.data_path.name}.",
            suffix=".tmp",
            dir=str(self.data_path.parent),
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.data_path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _read(self) -> dict:
        with open(self.data_path, 'r', encoding='utf-8') as f:
            return json.load(f)

    async def save(self, store: DocumentStore) -> bool:
        """Write the snapshot atomically; False if the write failed"""
        payload = store.to_dict()
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._write, payload)
        except Exception as e:
            self.logger.error(f"Failed to save data to {self.data_path}: {e}")
            return False

        self.logger.info(f"Saved {len(store.pages)} pages to {self.data_path}")
        return True

    async def load(self) -> DocumentStore:
        """Read the snapshot; an unreadable file yields an empty store"""
        if not self.data_path.exists():
            self.logger.warning(f"No existing data at {self.data_path}")
            self.state = StoreState.EMPTY
            return DocumentStore()

        self.state = StoreState.LOADING
        loop = asyncio.get_running_loop()
        try:
            raw = await loop.run_in_executor(None, self._read)
            store = DocumentStore.from_dict(raw)
        except Exception as e:
            self.logger.error(f"Failed to load data from {self.data_path}: {e}")
            self.state = StoreState.FAILED
            return DocumentStore()

        store.refresh_stats()
        self.state = StoreState.LOADED
        self.logger.info(f"Loaded {len(store.pages)} pages from {self.data_path}")
        return store
