# SitemapLens — IO helpers (file-like view over streamed chunks)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import io
import threading
from typing import Iterable, Iterator, Optional


class StreamCancelled(Exception):
	"""Raised by ChunkReader.read once its cancellation event is set."""


class ChunkReader(io.RawIOBase):
	"""Read-only binary file over an iterator of byte chunks.

	Lets a chunked HTTP body be handed to a parser that wants `read(size)`.
	The iterator is consumed once. When `cancelled` is given, every read
	checks it first so a blocked consumer stops at the next chunk boundary.
	"""

	def __init__(self, chunks: Iterable[bytes], cancelled: Optional[threading.Event] = None) -> None:
		self._chunks: Iterator[bytes] = iter(chunks)
		self._buf = b""
		self._cancelled = cancelled
		self._eof = False

	def readable(self) -> bool:
		return True

	def readinto(self, b) -> int:
		if self._cancelled is not None and self._cancelled.is_set():
			raise StreamCancelled("read aborted by cancellation")
		while not self._buf and not self._eof:
			try:
				chunk = next(self._chunks)
			except StopIteration:
				self._eof = True
				break
			if isinstance(chunk, str):
				chunk = chunk.encode("utf-8")
			self._buf = chunk
		n = min(len(b), len(self._buf))
		b[:n] = self._buf[:n]
		self._buf = self._buf[n:]
		return n


__all__ = ["ChunkReader", "StreamCancelled"]
