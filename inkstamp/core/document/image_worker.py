"""
Background loading of asset images for thumbnails and the page overlay.
"""
from typing import Callable, Dict, Iterable, List, Optional, Set

from PyQt5.QtCore import QObject, QThread, pyqtSignal

from inkstamp.utils.logging_service import get_logger

logger = get_logger(__name__)


class ImageFetchWorker(QThread):
    """Worker thread fetching a batch of images without freezing the UI."""

    # Signals
    image_loaded = pyqtSignal(str, bytes)  # url, data
    image_failed = pyqtSignal(str, str)  # url, message

    def __init__(self, image_source: Callable[[str], bytes], urls: Iterable[str]):
        super().__init__()
        self.image_source = image_source
        self.urls = list(urls)
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    def run(self):
        """Fetch each URL in turn, stopping early when cancelled."""
        for url in self.urls:
            if self._cancelled:
                return
            try:
                data = self.image_source(url)
            except (OSError, ValueError) as e:
                self.image_failed.emit(url, str(e))
                continue
            if not self._cancelled:
                self.image_loaded.emit(url, data)


class ImagePreloader(QObject):
    """
    Keeps asset image bytes for the UI and fetches missing ones in the background.

    ``get`` never blocks: it returns the bytes when they are already here
    and otherwise queues a fetch and returns None. ``image_ready`` fires
    once the bytes for a URL arrive, so widgets can repaint.
    """

    image_ready = pyqtSignal(str)  # url

    def __init__(self, image_source: Callable[[str], bytes], parent=None):
        super().__init__(parent)
        self.image_source = image_source
        self._images: Dict[str, bytes] = {}
        self._pending: Set[str] = set()
        self._failed: Set[str] = set()
        self._workers: List[ImageFetchWorker] = []

    def get(self, url: str) -> Optional[bytes]:
        if url in self._images:
            return self._images[url]
        self.request([url])
        return None

    def has_failed(self, url: str) -> bool:
        return url in self._failed

    def request(self, urls: Iterable[str]) -> None:
        """Start fetching every URL that is not loaded, pending or known to fail."""
        missing = [url for url in dict.fromkeys(urls)
                   if url not in self._images
                   and url not in self._pending
                   and url not in self._failed]
        if not missing:
            return

        self._pending.update(missing)
        worker = ImageFetchWorker(self.image_source, missing)
        worker.image_loaded.connect(self._on_image_loaded)
        worker.image_failed.connect(self._on_image_failed)
        worker.finished.connect(self._on_worker_finished)
        self._workers.append(worker)
        worker.start()

    def stop(self) -> None:
        """Cancel outstanding fetches and wait for their threads to end."""
        for worker in self._workers:
            worker.cancel()
        for worker in self._workers:
            worker.wait()
        self._workers.clear()
        self._pending.clear()

    def _on_image_loaded(self, url: str, data: bytes) -> None:
        self._pending.discard(url)
        self._images[url] = data
        self.image_ready.emit(url)

    def _on_image_failed(self, url: str, message: str) -> None:
        self._pending.discard(url)
        self._failed.add(url)
        logger.warning(f"Could not load image {url}: {message}")

    def _on_worker_finished(self) -> None:
        worker = self.sender()
        if worker in self._workers:
            self._workers.remove(worker)
            worker.deleteLater()
