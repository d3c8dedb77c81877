from __future__ import annotations

import hashlib
import io
import threading
import time
from typing import Dict, Optional, Tuple

from PIL import Image

from ..config import SETTINGS


StoreEntry = Tuple[float, Image.Image]


def image_token(img: Image.Image) -> str:
    buffer = io.BytesIO()
    img.save(buffer, "PNG")
    return hashlib.sha1(buffer.getvalue()).hexdigest()[:16]


class ImageStore:
    """Uploaded images kept in memory for a limited time."""

    def __init__(self) -> None:
        self._entries: Dict[str, StoreEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, token: str) -> Optional[Image.Image]:
        with self._lock:
            entry = self._entries.get(token)
            if not entry:
                return None
            timestamp, img = entry
            if time.time() - timestamp > SETTINGS.upload_ttl:
                self._entries.pop(token, None)
                return None
            return img

    def put(self, img: Image.Image) -> str:
        token = image_token(img)
        with self._lock:
            self._entries.pop(token, None)
            while len(self._entries) >= max(1, SETTINGS.max_uploads):
                oldest = min(self._entries.items(), key=lambda item: item[1][0])[0]
                self._entries.pop(oldest, None)
            self._entries[token] = (time.time(), img)
        return token

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


STORE = ImageStore()
