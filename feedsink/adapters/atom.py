# Copyright 2016 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""
Adapter that publishes a stream of events to an Atom endpoint.

Library dependencies: requests
"""
import logging
from collections.abc import Mapping

from feedsink.base import InputThing
from feedsink.sink import FeedSink

logger = logging.getLogger(__name__)


def event_to_record(event):
    """Map an event to a record of entry element name -> string. Mappings
    and namedtuples (e.g. SensorEvent style events) are accepted. Fields
    whose value is None are dropped.
    """
    if isinstance(event, Mapping):
        items = event.items()
    elif hasattr(event, '_asdict'):
        items = event._asdict().items()
    else:
        raise TypeError("Cannot publish event %r as an Atom entry, expecting a mapping or namedtuple" %
                        (event,))
    return {str(k): str(v) for (k, v) in items if v is not None}


class FeedWriter(InputThing):
    """Publishes each event as an Atom entry through a FeedSink.

    If raise_on_failure is True (the default), an unexpected server
    response raises ResponseError from on_next(). Otherwise the failure is
    logged and counted and the stream carries on. Whatever on_next() raises,
    the sink is disconnected and destroyed first.
    """
    def __init__(self, sink, raise_on_failure=True):
        self.sink = sink
        self.raise_on_failure = raise_on_failure
        self.outcomes = {'success': 0, 'failure': 0}
        self.closed = False
        self.sink.connect()

    @classmethod
    def from_options(cls, stream_id, options, client=None, raise_on_failure=True):
        return cls(FeedSink.from_options(stream_id, options, client=client),
                   raise_on_failure=raise_on_failure)

    def on_next(self, event):
        try:
            outcome = self.sink.publish(event_to_record(event))
            if outcome.ok:
                self.outcomes['success'] += 1
            else:
                self.outcomes['failure'] += 1
                if self.raise_on_failure:
                    outcome.raise_for_failure()
        except Exception:
            # the stream ends here, so no on_completed() will follow
            self._close()
            raise

    def _close(self):
        if not self.closed:
            self.closed = True
            self.sink.disconnect()
            self.sink.destroy()

    def on_completed(self):
        logger.info("%s completed: %d published, %d failed", self,
                    self.outcomes['success'], self.outcomes['failure'])
        self._close()

    def on_error(self, e):
        logger.error("%s: upstream error %s, closing", self, e)
        self._close()

    def __str__(self):
        return 'FeedWriter(%s)' % self.sink
