import threading
import time

import pytest

from sitemaplens.core.group import TaskGroup


class Counter:
	def __init__(self):
		self.lock = threading.Lock()
		self.active = 0
		self.peak = 0
		self.done = []

	def work(self, i, delay=0.02):
		with self.lock:
			self.active += 1
			self.peak = max(self.peak, self.active)
		time.sleep(delay)
		with self.lock:
			self.active -= 1
			self.done.append(i)


def test_runs_everything():
	c = Counter()
	with TaskGroup(4) as g:
		for i in range(10):
			assert g.go(c.work, i, 0)
		g.wait()
	assert sorted(c.done) == list(range(10))


def test_limit_bounds_concurrency():
	c = Counter()
	with TaskGroup(2) as g:
		for i in range(6):
			g.go(c.work, i)
		g.wait()
	assert c.peak <= 2
	assert len(c.done) == 6


def test_first_error_wins_and_stops_new_units():
	ran = []

	def boom(msg):
		raise RuntimeError(msg)

	with pytest.raises(RuntimeError, match="first"):
		with TaskGroup(1) as g:
			assert g.go(boom, "first")
			# the single slot frees only after the failure is recorded
			assert not g.go(ran.append, "never")
			g.wait()
	assert ran == []
	assert g.cancelled.is_set()


def test_wait_does_not_block_on_in_flight_units():
	release = threading.Event()

	def slow():
		release.wait(5)

	def boom():
		time.sleep(0.05)
		raise ValueError("fail fast")

	g = TaskGroup(2)
	g.go(slow)
	g.go(boom)
	start = time.monotonic()
	with pytest.raises(ValueError):
		g.wait()
	assert time.monotonic() - start < 2
	assert isinstance(g.error, ValueError)
	release.set()


def test_invalid_limit():
	with pytest.raises(ValueError):
		TaskGroup(0)
