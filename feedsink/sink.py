# Copyright 2016,2017 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""
Publishing stream records as Atom entries.

A FeedSink turns each record (a mapping from entry element name to string)
into exactly one mutation of the configured feed:

 * create - POST a new entry, stamped as published now, to the endpoint
 * update - GET the entry at the endpoint, merge the record into it and
            PUT it back. The GET and PUT are not atomic: a change made by
            someone else in between is silently overwritten.
 * delete - DELETE the entry addressed by the record's id (not the endpoint)

The server must answer with the configured status code. Anything else is a
failed PublishOutcome. Nothing is retried here; that is up to the caller.
"""
import logging
from collections import namedtuple

from feedsink.config import OperationMode, config_from_options, is_valid_url
from feedsink.client import FeedClient
from feedsink.entry import EntryFormatError, build_entry, now

logger = logging.getLogger(__name__)

REALM = None
AUTH_SCHEME = 'basic'


class ResponseError(Exception):
    """The server's answer was missing or not the one we expected.
    """
    def __init__(self, reason, status=None, status_text=None):
        super().__init__(reason)
        self.status = status
        self.status_text = status_text


class PublishOutcome(namedtuple('PublishOutcome',
                                ['ok', 'reason', 'status', 'status_text'])):
    __slots__ = ()

    @staticmethod
    def success(status, status_text=''):
        return PublishOutcome(True, None, status, status_text)

    @staticmethod
    def failure(reason, status=None, status_text=None):
        return PublishOutcome(False, reason, status, status_text)

    def raise_for_failure(self):
        if not self.ok:
            raise ResponseError(self.reason, self.status, self.status_text)


class Sink:
    """The lifecycle a host engine drives a connector through. The default
    hooks do nothing.
    """
    def connect(self):
        pass

    def disconnect(self):
        pass

    def destroy(self):
        pass

    def current_state(self):
        return None

    def restore_state(self, state):
        pass

    def publish(self, record):
        raise NotImplementedError


class FeedSink(Sink):
    """Publishes records to an Atom endpoint according to a ConnectorConfig.
    The client defaults to a FeedClient; tests pass in a fake one.
    """
    def __init__(self, config, client=None):
        self.config = config
        # a client we create is ours to close on destroy()
        self.owns_client = client is None
        self.client = client if client is not None else FeedClient()
        self._handlers = {
            OperationMode.CREATE: self._create,
            OperationMode.UPDATE: self._update,
            OperationMode.DELETE: self._delete,
        }
        if config.credentials is not None:
            if config.trust_all:
                self.client.register_trust_manager()
            self.client.add_credentials(config.endpoint, REALM, AUTH_SCHEME,
                                        config.credentials)

    @classmethod
    def from_options(cls, stream_id, options, client=None):
        return cls(config_from_options(stream_id, options), client=client)

    def publish(self, record):
        """Publish one record. Returns a PublishOutcome. Raises
        ConnectionUnavailableError if the endpoint cannot be reached.
        """
        outcome = self._handlers[self.config.operation_mode](record)
        if outcome.ok:
            logger.debug("Published %s to %s: %d %s",
                         self.config.operation_mode.value, self.config.stream_id,
                         outcome.status, outcome.status_text)
        else:
            logger.warning("Publish failed for %s: %s", self.config.stream_id,
                           outcome.reason)
        return outcome

    def _create(self, record):
        entry = build_entry(record)
        timestamp = now()
        entry.set_published(timestamp)
        if entry.get('updated') is None:
            entry.set_updated(timestamp)
        return self._check(self.client.post(self.config.endpoint, entry))

    def _update(self, record):
        endpoint = self.config.endpoint
        resp = self.client.get(endpoint)
        if resp is None:
            return self._null_response()
        try:
            if not (200 <= resp.status < 300):
                return PublishOutcome.failure(
                    "Could not retrieve the entry to update in %s, response status code is : %d-%s" %
                    (self.config.stream_id, resp.status, resp.status_text),
                    resp.status, resp.status_text)
            entry = resp.document()
        except EntryFormatError as e:
            return PublishOutcome.failure("Could not read the entry to update in %s: %s" %
                                          (self.config.stream_id, e))
        finally:
            resp.release()
        entry = build_entry(record, entry)
        return self._check(self.client.put(endpoint, entry))

    def _delete(self, record):
        location = record.get('id')
        if location is None:
            return PublishOutcome.failure("Cannot delete in %s: record has no 'id'" %
                                          self.config.stream_id)
        if not is_valid_url(location):
            return PublishOutcome.failure("Cannot delete in %s: id %r is not an entry location" %
                                          (self.config.stream_id, location))
        return self._check(self.client.delete(location))

    def _null_response(self):
        return PublishOutcome.failure("Response is null in %s" % self.config.stream_id)

    def _check(self, resp):
        if resp is None:
            return self._null_response()
        try:
            if resp.status!=self.config.expected_status:
                return PublishOutcome.failure(
                    "Response status conflicts in %s, expected %d, response status code is : %d-%s" %
                    (self.config.stream_id, self.config.expected_status,
                     resp.status, resp.status_text),
                    resp.status, resp.status_text)
            return PublishOutcome.success(resp.status, resp.status_text)
        finally:
            resp.release()

    def destroy(self):
        self.client.clear_credentials()
        if self.owns_client:
            self.client.close()

    def __str__(self):
        return 'FeedSink(%s, %s %s)' % (self.config.stream_id,
                                        self.config.operation_mode.value,
                                        self.config.endpoint)
