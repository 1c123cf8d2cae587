# SitemapLens — Bounded task group with first-error cancellation
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import logging
import threading
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Callable, List, Optional


logger = logging.getLogger(__name__)


class TaskGroup:
	"""Runs units of work on at most `limit` threads.

	The first unit to raise records its exception and sets `cancelled`. After
	that no new unit starts, `go` stops accepting work and `wait` returns
	without waiting for units still in flight. Later exceptions are dropped.
	"""

	def __init__(self, limit: int, name: str = "sitemaplens") -> None:
		if limit < 1:
			raise ValueError("limit must be >= 1")
		self.limit = limit
		self.cancelled = threading.Event()
		self._slots = threading.BoundedSemaphore(limit)
		self._executor = ThreadPoolExecutor(max_workers=limit, thread_name_prefix=name)
		self._futures: List[Future] = []
		self._lock = threading.Lock()
		self._error: Optional[BaseException] = None

	def __enter__(self) -> "TaskGroup":
		return self

	def __exit__(self, exc_type, exc, tb) -> None:
		if exc is not None:
			self.cancel()
		self._executor.shutdown(wait=exc is None and self._error is None, cancel_futures=True)

	@property
	def error(self) -> Optional[BaseException]:
		return self._error

	def cancel(self) -> None:
		self.cancelled.set()

	def _record(self, err: BaseException) -> None:
		with self._lock:
			if self._error is None:
				self._error = err
				self.cancelled.set()
			else:
				logger.debug("Dropping error after cancellation: %s", err)

	def _run(self, fn: Callable, args: tuple) -> None:
		try:
			if self.cancelled.is_set():
				return
			fn(*args)
		except Exception as e:
			self._record(e)
			raise
		finally:
			self._slots.release()

	def go(self, fn: Callable, *args) -> bool:
		"""Submit `fn(*args)`, blocking while `limit` units are in flight.

		Returns False, without submitting, once the group is cancelled.
		"""
		# short waits so a cancellation is noticed while saturated
		while not self._slots.acquire(timeout=0.05):
			if self.cancelled.is_set():
				return False
		if self.cancelled.is_set():
			self._slots.release()
			return False
		self._futures.append(self._executor.submit(self._run, fn, args))
		return True

	def wait(self) -> None:
		"""Block until every unit finished or one failed; raise the first error."""
		if self._futures:
			wait(self._futures, return_when=FIRST_EXCEPTION)
		if self._error is not None:
			self._executor.shutdown(wait=False, cancel_futures=True)
			raise self._error
		if self.cancelled.is_set():
			# cancelled from outside: still-running units are not waited for
			self._executor.shutdown(wait=False, cancel_futures=True)
			return
		self._executor.shutdown(wait=True)


__all__ = ["TaskGroup"]
