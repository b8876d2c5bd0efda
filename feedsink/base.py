# Copyright 2016,2017 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""
Stream-side abstractions for feedsink. The connector itself does not care
which engine drives it, but it needs a place in a dataflow to receive
events from. The key abstractions are:

 * InputThing  - interface for things that receive a stream of events.
                 A sink adapter is an InputThing.
 * OutputThing - base class for things that emit an event stream to the
                 InputThings connected to it.
 * IterableAsOutputThing - turns any iterator into an OutputThing.
 * FatalError  - base class for errors that must stop the whole dataflow
                 rather than a single event.

Events are pushed one at a time. `run_to_completion()` drives an
OutputThing sequentially until its stream is closed.
"""

import logging
logger = logging.getLogger(__name__)


class InputThing:
    """This is the interface for a thing that receives events. Subclasses
    override the methods they care about.
    """
    def on_next(self, x):
        pass

    def on_error(self, e):
        pass

    def on_completed(self):
        pass


class FatalError(Exception):
    """This is the base class for exceptions that should terminate the
    dataflow. This should be for out-of-bound errors, not for normal errors in
    the data stream. Examples include a connector that could not be
    configured or an unexpected exception while dispatching an event.
    """
    pass

class PortAlreadyClosed(FatalError):
    pass

class ExcInDispatch(FatalError):
    """Dispatching an event should not raise an error, other than a
    fatal error.
    """
    pass


class CallableAsInputThing(InputThing):
    """Wrap any callable with the InputThing interface.
    Only on_next() calls are passed to it.
    """
    def __init__(self, on_next):
        self._fn = on_next

    def on_next(self, x):
        self._fn(x)

    def on_error(self, e):
        if isinstance(e, FatalError):
            raise e
        logger.error("%s: Received on_error(%s)", self, e)

    def __str__(self):
        return 'CallableAsInputThing(%s)' % str(self._fn)


class OutputThing:
    """Base class for event generators. The non-underscore
    methods are the public end-user interface. The methods starting with
    underscores are for the thing itself and its driver.
    """
    def __init__(self):
        self.__connections__ = []
        self.__closed__ = False

    def connect(self, input_thing):
        """Connect the InputThing to this thing's events. Plain callables
        are wrapped so they only see on_next().

        This returns a function that can be called to remove the connection.
        """
        if not hasattr(input_thing, 'on_next') and callable(input_thing):
            input_thing = CallableAsInputThing(input_thing)
        # replace rather than mutate, so disconnect() is safe mid-dispatch
        self.__connections__ = self.__connections__ + [input_thing]
        def disconnect():
            self.__connections__ = [c for c in self.__connections__
                                    if c is not input_thing]
        return disconnect

    def _is_closed(self):
        return self.__closed__

    def _check_open(self):
        if self.__closed__:
            raise PortAlreadyClosed("OutputThing %s already had an on_completed or on_error event" %
                                    self)

    def _dispatch_next(self, x):
        self._check_open()
        for s in self.__connections__:
            try:
                s.on_next(x)
            except FatalError:
                raise
            except Exception as e:
                raise ExcInDispatch("Unexpected exception when dispatching event '%s' to InputThing %s from OutputThing %s" %
                                    (repr(x), s, self)) from e

    def _dispatch_completed(self):
        self._check_open()
        self.__closed__ = True
        for s in self.__connections__:
            try:
                s.on_completed()
            except FatalError:
                raise
            except Exception as e:
                raise ExcInDispatch("Unexpected exception when dispatching completed to InputThing %s from OutputThing %s" %
                                    (s, self)) from e

    def _dispatch_error(self, e):
        self._check_open()
        self.__closed__ = True
        for s in self.__connections__:
            try:
                s.on_error(e)
            except FatalError:
                raise
            except Exception as e2:
                raise ExcInDispatch("Unexpected exception when dispatching error '%s' to InputThing %s from OutputThing %s" %
                                    (repr(e), s, self)) from e2

    def __str__(self):
        return self.__class__.__name__ + '()'


class IterableAsOutputThing(OutputThing):
    """Convert any iterator to an OutputThing. Each call to _observe()
    emits at most one event.
    """
    def __init__(self, iterable, name=None):
        super().__init__()
        self.iterable = iterable
        self.name = name

    def _observe(self):
        try:
            event = self.iterable.__next__()
        except StopIteration:
            self._close()
            self._dispatch_completed()
        except FatalError:
            self._close()
            raise
        except Exception as e:
            # Errors from the source are part of the stream: they go
            # downstream and end it.
            logger.exception("Error reading from %s", self)
            self._close()
            self._dispatch_error(e)
        else:
            self._dispatch_next(event)

    def _close(self):
        """Called when we stop the iteration, either due to reaching the end
        of the sequence or an error. Subclasses can override this to release
        resources.
        """
        pass

    def __str__(self):
        if self.name:
            return self.name
        else:
            return super().__str__()

def from_iterable(i):
    return IterableAsOutputThing(iter(i))

def from_list(l):
    return IterableAsOutputThing(iter(l))


def run_to_completion(output_thing):
    """Drive the output thing one event at a time until its stream is
    closed. Fatal errors propagate to the caller.
    """
    count = 0
    while not output_thing._is_closed():
        output_thing._observe()
        count += 1
    logger.debug("%s closed after %d observations", output_thing, count)
    return count
