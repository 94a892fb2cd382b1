# modules/realtime/broker.py
"""
Change broker for realtime listeners.

Writers publish (collection, keys) after a commit; every subscriber that
registered one of the matching topics gets a change notice on its queue.
Topics are (collection, key) pairs. Key '*' matches every write to the
collection.

Format of a notice: {'collection': str, 'keys': [str, ...], 'at': float}
"""

import itertools
import queue
import threading
import time

ANY = '*'


class Subscription:
    """One listener: its topics and its pending-change queue"""

    def __init__(self, sub_id, topics, maxsize):
        self.id = sub_id
        self.topics = frozenset(topics)
        self.queue = queue.Queue(maxsize=maxsize)
        self.dropped = 0

    def notify(self, notice):
        try:
            self.queue.put_nowait(notice)
        except queue.Full:
            # The consumer re-reads a full snapshot on the next notice anyway
            self.dropped += 1

    def wait(self, timeout):
        """Block until a change arrives; None on timeout"""
        try:
            notice = self.queue.get(timeout=timeout)
        except queue.Empty:
            return None
        # Collapse a burst of writes into one snapshot
        while True:
            try:
                self.queue.get_nowait()
            except queue.Empty:
                return notice


class ChangeBroker:

    def __init__(self, maxsize=1000):
        self.maxsize = maxsize
        self._subs = {}
        self._lock = threading.Lock()
        self._ids = itertools.count(1)

    def subscribe(self, topics, maxsize=None):
        topics = [(c, str(k)) for c, k in topics]
        if not topics:
            raise ValueError('subscription needs at least one topic')
        with self._lock:
            sub = Subscription(next(self._ids), topics, maxsize or self.maxsize)
            self._subs[sub.id] = sub
        return sub

    def unsubscribe(self, sub):
        with self._lock:
            self._subs.pop(getattr(sub, 'id', sub), None)

    def publish(self, collection, *keys):
        """Notify every subscriber of (collection, key) or (collection, '*')"""
        wanted = {(collection, ANY)} | {(collection, str(k)) for k in keys if k is not None}
        notice = {'collection': collection, 'keys': [str(k) for k in keys if k is not None], 'at': time.time()}
        with self._lock:
            targets = [s for s in self._subs.values() if s.topics & wanted]
        for sub in targets:
            sub.notify(notice)
        return len(targets)

    @property
    def subscriber_count(self):
        with self._lock:
            return len(self._subs)

    def clear(self):
        with self._lock:
            self._subs.clear()


broker = ChangeBroker()


def publish(collection, *keys):
    return broker.publish(collection, *keys)
