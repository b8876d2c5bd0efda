# Copyright 2016 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""Some simple tests for the base layer.
"""
import unittest

from feedsink.base import InputThing, FatalError, ExcInDispatch, \
    PortAlreadyClosed, from_list, from_iterable, run_to_completion
from utils import CaptureInputThing

value_stream = [20, 30, 100, 120]


class DieAfter(InputThing):
    def __init__(self, num_events):
        self.events_left = num_events

    def on_next(self, x):
        self.events_left -= 1
        if self.events_left == 0:
            raise FatalError("this is a fatal error")


class TestOutputThing(unittest.TestCase):
    def test_all_events_then_completed(self):
        source = from_list(value_stream)
        c1 = CaptureInputThing()
        c2 = CaptureInputThing()
        source.connect(c1)
        source.connect(c2)
        count = run_to_completion(source)
        self.assertEqual(count, len(value_stream)+1)
        for c in (c1, c2):
            self.assertEqual(c.events, value_stream)
            self.assertTrue(c.completed)
            self.assertEqual(c.errors, [])

    def test_callable_and_disconnect(self):
        seen = []
        source = from_iterable(value_stream)
        disconnect = source.connect(seen.append)
        source._observe()
        disconnect()
        run_to_completion(source)
        self.assertEqual(seen, [20])

    def test_fatal_error_propagates(self):
        source = from_list(value_stream)
        source.connect(DieAfter(2))
        with self.assertRaises(FatalError) as cm:
            run_to_completion(source)
        self.assertFalse(isinstance(cm.exception, ExcInDispatch))

    def test_other_errors_wrapped(self):
        def bad(x):
            raise ValueError("bad event %s" % x)
        source = from_list(value_stream)
        source.connect(bad)
        with self.assertRaises(ExcInDispatch) as cm:
            run_to_completion(source)
        self.assertTrue(isinstance(cm.exception.__cause__, ValueError))

    def test_source_error_goes_downstream(self):
        def gen():
            yield 1
            raise IOError("source failed")
        source = from_list([])
        source.iterable = gen()
        c = CaptureInputThing()
        source.connect(c)
        run_to_completion(source)
        self.assertEqual(c.events, [1])
        self.assertEqual(len(c.errors), 1)
        self.assertFalse(c.completed)

    def test_no_events_after_close(self):
        source = from_list([])
        run_to_completion(source)
        with self.assertRaises(PortAlreadyClosed):
            source._dispatch_next(1)


if __name__ == '__main__':
    unittest.main()
