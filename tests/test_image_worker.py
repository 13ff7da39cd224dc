import pytest

from inkstamp.core.document.image_worker import ImageFetchWorker, ImagePreloader


class FakeSource:
    def __init__(self, images):
        self.images = images
        self.calls = []

    def __call__(self, url):
        self.calls.append(url)
        if url not in self.images:
            raise OSError(f"404 for {url}")
        return self.images[url]


@pytest.fixture()
def started(monkeypatch):
    workers = []
    monkeypatch.setattr(ImageFetchWorker, "start", lambda self: workers.append(self))
    return workers


def test_worker_reports_each_url():
    source = FakeSource({"a.png": b"A"})
    worker = ImageFetchWorker(source, ["a.png", "missing.png"])
    loaded, failed = [], []
    worker.image_loaded.connect(lambda url, data: loaded.append((url, data)))
    worker.image_failed.connect(lambda url, message: failed.append(url))

    worker.run()

    assert loaded == [("a.png", b"A")]
    assert failed == ["missing.png"]


def test_cancelled_worker_fetches_nothing():
    source = FakeSource({"a.png": b"A"})
    worker = ImageFetchWorker(source, ["a.png"])
    worker.cancel()
    worker.run()
    assert source.calls == []


def test_get_does_not_fetch_on_the_calling_thread(started):
    source = FakeSource({"a.png": b"A"})
    preloader = ImagePreloader(source)

    assert preloader.get("a.png") is None
    assert source.calls == []
    assert [w.urls for w in started] == [["a.png"]]


def test_pending_url_is_requested_once(started):
    preloader = ImagePreloader(FakeSource({}))
    preloader.get("a.png")
    preloader.get("a.png")
    preloader.request(["a.png", "b.png", "b.png"])
    assert [w.urls for w in started] == [["a.png"], ["b.png"]]


def test_loaded_image_is_announced_and_kept(started):
    preloader = ImagePreloader(FakeSource({"a.png": b"A"}))
    ready = []
    preloader.image_ready.connect(ready.append)

    preloader.get("a.png")
    started[0].run()

    assert ready == ["a.png"]
    assert preloader.get("a.png") == b"A"
    assert len(started) == 1


def test_failed_image_is_not_retried(started):
    preloader = ImagePreloader(FakeSource({}))
    preloader.get("missing.png")
    started[0].run()

    assert preloader.has_failed("missing.png")
    assert preloader.get("missing.png") is None
    assert len(started) == 1


def test_stop_cancels_outstanding_workers(started):
    preloader = ImagePreloader(FakeSource({"a.png": b"A"}))
    preloader.get("a.png")
    worker = started[0]

    preloader.stop()
    worker.run()

    assert preloader.get("a.png") is None
    assert len(started) == 2
