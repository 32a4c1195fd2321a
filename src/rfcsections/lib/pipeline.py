"""Document pipeline: retrieval, extraction, filtering and CSV output.

Each document runs as two asyncio tasks joined by a SectionChannel:

- The producer pulls sections from the extractor (in a worker thread, since
  the token cursor reads the network synchronously), drops excluded
  categories, and sends the rest.
- The consumer writes each received section to the CSV file and flushes it
  when the channel is closed.

The channel is a rendezvous: send() returns only after the consumer has
finished with the section, so at most one section is in flight.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator, Callable, Generator, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from rfcsections.lib.csv_sink import SectionCsvWriter
from rfcsections.lib.errors import DocumentError
from rfcsections.lib.extractor import SectionExtractor
from rfcsections.lib.logging_config import get_logger
from rfcsections.models.config import AppConfig
from rfcsections.models.section import Section
from rfcsections.services.document_client import DocumentClient

logger = get_logger(__name__)

_CLOSED = object()


class SectionChannel:
    """Unbuffered handoff between the producer and consumer tasks."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=1)
        self._closed = False

    async def send(self, section: Section) -> None:
        """Hand over a section and wait until the consumer is done with it."""
        if self._closed:
            raise RuntimeError("send on closed channel")
        await self._queue.put(section)
        await self._queue.join()

    async def close(self) -> None:
        """Signal that no more sections will be sent."""
        if self._closed:
            return
        self._closed = True
        # Full only when the consumer died holding an undelivered section
        with contextlib.suppress(asyncio.QueueFull):
            self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> AsyncIterator[Section]:
        return self._receive()

    async def _receive(self) -> AsyncIterator[Section]:
        while True:
            item = await self._queue.get()
            try:
                if item is _CLOSED:
                    return
                yield item  # type: ignore[misc]
            finally:
                self._queue.task_done()


class CategoryFilter:
    """Case-insensitive category exclusion list."""

    def __init__(self, exclude: Iterable[str]) -> None:
        self._excluded = frozenset(category.casefold() for category in exclude)

    def accepts(self, section: Section) -> bool:
        return section.category.casefold() not in self._excluded


@dataclass
class DocumentResult:
    """Outcome of processing one document.

    Attributes:
        identifier: Identifier as given on the command line
        locator: Resolved URL
        output_path: CSV destination
        written: Rows written (excluding the header)
        filtered: Sections dropped by the category filter
        error: Per-document failure, if any
    """

    identifier: str
    locator: str
    output_path: Path
    written: int = 0
    filtered: int = 0
    error: DocumentError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def partial(self) -> bool:
        """True when a failed document still left rows in its output file."""
        return self.error is not None and self.written > 0


@dataclass
class BatchResult:
    """Outcome of a multi-document run."""

    results: list[DocumentResult] = field(default_factory=list)

    @property
    def failed(self) -> list[DocumentResult]:
        return [result for result in self.results if not result.ok]

    @property
    def succeeded(self) -> list[DocumentResult]:
        return [result for result in self.results if result.ok]


class SectionPipeline:
    """Runs retrieval, extraction, filtering and output for documents.

    Example:
        >>> pipeline = SectionPipeline(AppConfig())
        >>> result = asyncio.run(pipeline.run("5280"))
        >>> print(result.output_path, result.written)
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        client: DocumentClient | None = None,
        writer_factory: Callable[[Path], SectionCsvWriter] = SectionCsvWriter,
        include_all: bool = False,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Effective configuration
            client: Document client, created from config.retrieval if omitted
            writer_factory: Builds the CSV writer for an output path
            include_all: Disable the category exclusion filter
        """
        self.config = config or AppConfig()
        self.client = client or DocumentClient(self.config.retrieval)
        self.extractor = SectionExtractor(self.config.extraction)
        self.filter = CategoryFilter(
            [] if include_all else self.config.output.exclude_categories
        )
        self._writer_factory = writer_factory

    def output_path(self, locator: str) -> Path:
        """Return the CSV path for a resolved locator."""
        name = self.client.output_name(locator)
        return Path(self.config.output.output_dir) / f"{name}.csv"

    async def run(self, identifier: str) -> DocumentResult:
        """Process a single document.

        Per-document failures are logged and recorded on the result. When
        extraction fails partway, the rows already written stay in the
        flushed file and are counted in ``written``.

        Args:
            identifier: RFC number or full URL

        Returns:
            DocumentResult with row counts and the failure, if any

        Raises:
            OutputError: The CSV file could not be written
        """
        locator = self.client.resolve_locator(identifier)
        result = DocumentResult(
            identifier=identifier,
            locator=locator,
            output_path=self.output_path(locator),
        )
        logger.info(f"Processing {identifier} from {locator}")

        writer: SectionCsvWriter | None = None
        try:
            with contextlib.ExitStack() as stack:
                document = await asyncio.to_thread(
                    stack.enter_context, self.client.open(locator)
                )
                sections = self.extractor.extract(document.cursor())
                writer = self._writer_factory(result.output_path)
                result.written, result.filtered = await self.stream(
                    sections, writer
                )
        except DocumentError as e:
            result.error = e
            if writer is not None:
                result.written = writer.rows_written
            logger.error(f"Failed to process {identifier} ({locator}): {e}")
            if result.partial:
                logger.warning(
                    f"Kept {result.written} sections in partial file "
                    f"{result.output_path}"
                )
            return result

        logger.info(
            f"Wrote {result.written} sections to {result.output_path} "
            f"({result.filtered} filtered)"
        )
        return result

    async def stream(
        self, sections: Iterator[Section], writer: SectionCsvWriter
    ) -> tuple[int, int]:
        """Filter sections and write them through a rendezvous channel.

        Returns:
            Tuple of (rows written, sections filtered)

        Raises:
            OutputError: If the consumer fails; the producer is cancelled
            DocumentError: If extraction fails; output written so far is
                flushed first
        """
        channel = SectionChannel()
        producer = asyncio.create_task(self._produce(sections, channel))
        consumer = asyncio.create_task(self._consume(channel, writer))

        await asyncio.wait(
            {producer, consumer}, return_when=asyncio.FIRST_EXCEPTION
        )

        if consumer.done() and consumer.exception() is not None:
            producer.cancel()
            await asyncio.gather(producer, return_exceptions=True)
            # No worker thread is inside the extractor any more
            if isinstance(sections, Generator):
                sections.close()
            raise consumer.exception()  # type: ignore[misc]

        # The producer closes the channel even when it fails, so the
        # consumer always runs to completion here.
        written = await consumer
        filtered = await producer
        return written, filtered

    async def _pull(self, sections: Iterator[Section]) -> Section | None:
        """Advance the extractor by one section in a worker thread.

        If the calling task is cancelled, the in-flight step is awaited
        before the cancellation propagates.
        """
        step = asyncio.ensure_future(asyncio.to_thread(next, sections, None))
        try:
            return await asyncio.shield(step)
        except asyncio.CancelledError:
            await asyncio.gather(step, return_exceptions=True)
            raise

    async def _produce(
        self, sections: Iterator[Section], channel: SectionChannel
    ) -> int:
        filtered = 0
        try:
            while True:
                section = await self._pull(sections)
                if section is None:
                    break
                if not self.filter.accepts(section):
                    filtered += 1
                    logger.debug(
                        f"Skipping section {section.name!r} "
                        f"(category {section.category!r})"
                    )
                    continue
                await channel.send(section)
        finally:
            await channel.close()
        return filtered

    async def _consume(
        self, channel: SectionChannel, writer: SectionCsvWriter
    ) -> int:
        writer.open()
        try:
            async for section in channel:
                writer.write(section)
        finally:
            writer.close()
        return writer.rows_written


async def process_documents(
    identifiers: Iterable[str],
    pipeline: SectionPipeline,
) -> BatchResult:
    """Process documents one after another.

    Per-document failures are recorded by SectionPipeline.run so the
    remaining documents still run. OutputError is not caught and aborts
    the batch.
    """
    batch = BatchResult()
    for identifier in identifiers:
        batch.results.append(await pipeline.run(identifier))
    return batch
