# Copyright 2016 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""Common utilities for the tests
"""
import unittest

from feedsink.base import InputThing
from feedsink.entry import Entry

ENDPOINT = 'http://feeds.example.com/news'

ENTRY_XML = b"""<?xml version='1.0' encoding='utf-8'?>
<entry xmlns="http://www.w3.org/2005/Atom">
  <id>http://feeds.example.com/news/1</id>
  <title>Original title</title>
  <summary>Original summary</summary>
  <author><name>Alice</name></author>
  <updated>2019-01-01T00:00:00+00:00</updated>
  <link rel="edit" href="http://feeds.example.com/news/1/edit"/>
</entry>
"""


def make_options(**kwargs):
    """Build a connector option map. Keyword names use _ for . so
    atom_func='update' becomes {'atom.func': 'update'}.
    """
    options = {'url': ENDPOINT}
    for (k, v) in kwargs.items():
        options[k.replace('_', '.')] = v
    return options


class FakeResponse:
    def __init__(self, status, status_text='', body=None):
        self.status = status
        self.status_text = status_text
        self.body = body
        self.release_count = 0

    def document(self):
        return Entry.from_xml(self.body)

    def release(self):
        self.release_count += 1

    def __repr__(self):
        return 'FakeResponse(%d %s)' % (self.status, self.status_text)


class FakeAtomClient:
    """Stands in for FeedClient. Records every request as a
    (method, url, entry) tuple and answers with the queued responses in
    order, then with the default response. A queued None is returned as is.
    """
    def __init__(self, responses=None, default_status=201, default_text='Created'):
        self.requests = []
        self.responses = list(responses) if responses is not None else []
        self.default_status = default_status
        self.default_text = default_text
        self.answered = []
        self.trust_all = False
        self.credentials = {}
        self.clear_count = 0

    def _answer(self, method, url, entry=None):
        self.requests.append((method, url, entry))
        if self.responses:
            resp = self.responses.pop(0)
        else:
            resp = FakeResponse(self.default_status, self.default_text)
        self.answered.append(resp)
        return resp

    def post(self, url, entry):
        return self._answer('POST', url, entry)

    def get(self, url):
        return self._answer('GET', url)

    def put(self, url, entry):
        return self._answer('PUT', url, entry)

    def delete(self, url):
        return self._answer('DELETE', url)

    def register_trust_manager(self):
        self.trust_all = True

    def add_credentials(self, uri, realm, scheme, credentials):
        self.credentials[uri] = (scheme, credentials)

    def clear_credentials(self):
        self.credentials.clear()
        self.trust_all = False
        self.clear_count += 1

    def methods(self):
        return [method for (method, url, entry) in self.requests]


class CaptureInputThing(InputThing):
    """Keep every event, error and completion for later assertions.
    """
    def __init__(self):
        self.events = []
        self.errors = []
        self.completed = False

    def on_next(self, x):
        self.events.append(x)

    def on_error(self, e):
        self.errors.append(e)

    def on_completed(self):
        self.completed = True


class RecordingSink:
    """A sink that only counts lifecycle calls, for adapter tests.
    """
    def __init__(self, outcome):
        self.outcome = outcome
        self.records = []
        self.calls = []

    def connect(self):
        self.calls.append('connect')

    def disconnect(self):
        self.calls.append('disconnect')

    def destroy(self):
        self.calls.append('destroy')

    def publish(self, record):
        self.records.append(record)
        return self.outcome

    def __str__(self):
        return 'RecordingSink()'


def assert_entry_fields(test_case, entry, expected):
    """Check that each expected element has the expected value.
    """
    assert isinstance(test_case, unittest.TestCase)
    fields = entry.fields()
    for (name, value) in expected.items():
        test_case.assertEqual(fields.get(name), value,
                              "Element '%s' of %r" % (name, entry))
