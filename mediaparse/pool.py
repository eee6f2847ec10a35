"""
Worker pool dispatcher.

A fixed number of threads drain one shared task queue of article URLs.
Each worker fetches a page, applies the site's extraction rules and puts
exactly one outcome on the result queue. The result stream ends once every
worker has exited, so consumers simply iterate until exhaustion.
"""
import logging
import queue
import threading
from typing import Iterable, Iterator, List, Optional

from mediaparse.errors import ExtractionError, FetchError
from mediaparse.outcomes import Failure, PageOutcome, classify


logger = logging.getLogger(__name__)

_CLOSED = object()


class WorkerPool:
    """
    Bounded pool of fetch-and-extract workers sharing one fetcher.

    Workers keep no shared accumulation state; the queues are the only
    synchronization points.
    """

    def __init__(self, fetcher, workers: int = 10):
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self.fetcher = fetcher
        self.workers = workers

    def run(
        self,
        urls: Iterable[str],
        extractor,
        workers: Optional[int] = None,
    ) -> Iterator[PageOutcome]:
        """
        Yield one outcome per URL in arrival order.

        Never starts more threads than there are URLs.
        """
        urls = list(urls)
        count = min(workers or self.workers, len(urls))
        if count == 0:
            return

        tasks: queue.Queue = queue.Queue()
        results: queue.Queue = queue.Queue()
        for url in urls:
            tasks.put(url)
        for _ in range(count):
            tasks.put(_CLOSED)

        threads: List[threading.Thread] = [
            threading.Thread(
                target=self._work,
                args=(tasks, results, extractor),
                name=f"mediaparse-worker-{i}",
                daemon=True,
            )
            for i in range(count)
        ]
        for thread in threads:
            thread.start()

        def close_when_done():
            for thread in threads:
                thread.join()
            results.put(_CLOSED)

        threading.Thread(target=close_when_done, daemon=True).start()
        logger.info(f"Dispatched {len(urls)} pages to {count} workers")

        while True:
            outcome = results.get()
            if outcome is _CLOSED:
                break
            yield outcome

    def _work(self, tasks: queue.Queue, results: queue.Queue, extractor) -> None:
        while True:
            url = tasks.get()
            if url is _CLOSED:
                break
            results.put(self.process(url, extractor))

    def process(self, url: str, extractor) -> PageOutcome:
        """Fetch, extract and classify a single URL."""
        try:
            document = self.fetcher.fetch(url, encoding=extractor.encoding)
        except FetchError as e:
            logger.debug(f"Fetch failed for {url}: {e}")
            return Failure(url, e)
        except Exception as e:
            logger.exception(f"Unexpected fetch error for {url}")
            return Failure(url, e)

        try:
            fields = extractor.extract_fields(document)
            return classify(
                extractor.site,
                url,
                fields,
                require_date=extractor.require_date,
                require_tags=extractor.require_tags,
            )
        except Exception as e:
            logger.exception(f"Extraction rules failed on {url}")
            return Failure(url, ExtractionError(url, e))
