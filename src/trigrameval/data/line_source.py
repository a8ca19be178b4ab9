from __future__ import annotations

from pathlib import Path
from typing import IO, Iterator, List, Optional

NUL = "\x00"


class ChunkedLineSource:
    """
    Read a text file in bounded batches of lines.

    The whole file is never buffered: each read_batch(n) call pulls at most n
    lines from the open handle. Null bytes are stripped from every line and
    undecodable bytes are replaced, so dirty corpora never abort a run.
    Only LF ends a line, as in count_lines; a stray or CRLF carriage return
    stays part of the line. Reads only return what the file already holds;
    an empty batch means the source is exhausted.

    Usage:
        with ChunkedLineSource(path) as source:
            for batch in source.iter_batches(2500):
                ...
    """

    def __init__(self, path: Path | str, encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding
        self.lines_read = 0
        self._handle: Optional[IO[str]] = None

    def open(self) -> "ChunkedLineSource":
        if self._handle is None:
            # raises FileNotFoundError / OSError when the corpus is unreadable
            self._handle = self.path.open(
                "r", encoding=self.encoding, errors="replace", newline="\n"
            )
            self.lines_read = 0
        return self

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    @property
    def closed(self) -> bool:
        return self._handle is None

    def __enter__(self) -> "ChunkedLineSource":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def read_batch(self, n: int) -> List[str]:
        """Return up to n lines without trailing newlines; [] at end of file."""
        if n < 1:
            raise ValueError(f"Batch size must be positive, got {n}")
        if self._handle is None:
            raise ValueError(f"Line source for {self.path} is not open")

        batch: List[str] = []
        for line in self._handle:
            batch.append(line.rstrip("\n").replace(NUL, ""))
            if len(batch) == n:
                break

        self.lines_read += len(batch)
        return batch

    def skip(self, n: int) -> int:
        """Discard up to n lines (used when resuming). Returns lines skipped."""
        skipped = 0
        while skipped < n:
            batch = self.read_batch(min(n - skipped, 10_000))
            if not batch:
                break
            skipped += len(batch)
        return skipped

    def iter_batches(self, n: int) -> Iterator[List[str]]:
        """Yield non-empty batches of up to n lines until the file is exhausted."""
        while True:
            batch = self.read_batch(n)
            if not batch:
                return
            yield batch
