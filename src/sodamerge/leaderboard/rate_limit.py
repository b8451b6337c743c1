from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass, field
from time import monotonic
from typing import Callable, Deque, Dict


@dataclass(slots=True)
class RateLimiter:
	"""Sliding-window write limiter keyed by client address.

	A key may record at most ``max_requests`` hits within any ``window`` seconds;
	rejected hits are not recorded. Keys whose hits have all expired are swept
	at most once per window, so the table only holds recently active clients.
	"""

	max_requests: int = 15
	window: float = 60.0
	clock: Callable[[], float] | None = field(default=None, repr=False)

	_clock: Callable[[], float] = field(init=False, repr=False)
	_hits: Dict[str, Deque[float]] = field(init=False, repr=False)
	_lock: threading.Lock = field(init=False, repr=False)
	_last_sweep: float = field(init=False, repr=False)

	def __post_init__(self) -> None:
		self._clock = self.clock or monotonic
		self._hits = {}
		self._lock = threading.Lock()
		self._last_sweep = self._clock()

	@property
	def tracked_keys(self) -> int:
		with self._lock:
			return len(self._hits)

	def allow(self, key: str) -> bool:
		now = self._clock()
		with self._lock:
			if now - self._last_sweep >= self.window:
				self._sweep(now)
			bucket = self._hits.setdefault(key, deque())
			self._prune(bucket, now)
			if len(bucket) >= self.max_requests:
				return False
			bucket.append(now)
			return True

	def remaining(self, key: str) -> int:
		now = self._clock()
		with self._lock:
			bucket = self._hits.get(key)
			if not bucket:
				return self.max_requests
			recent = sum(1 for ts in bucket if (now - ts) < self.window)
			return max(0, self.max_requests - recent)

	def reset(self) -> None:
		with self._lock:
			self._hits.clear()

	def _prune(self, bucket: Deque[float], now: float) -> None:
		while bucket and (now - bucket[0]) >= self.window:
			bucket.popleft()

	def _sweep(self, now: float) -> None:
		# Caller holds the lock.
		for key in list(self._hits):
			bucket = self._hits[key]
			self._prune(bucket, now)
			if not bucket:
				del self._hits[key]
		self._last_sweep = now
