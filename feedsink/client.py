# Copyright 2016,2017 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""
HTTP transport for Atom entries.

Library dependencies: requests

Each FeedClient owns its own requests.Session, so credentials and the
certificate-verification setting registered on one client never leak into
another connector.
"""
import logging
from urllib.parse import urlsplit

import requests
from requests.auth import HTTPBasicAuth, HTTPDigestAuth

from feedsink.entry import Entry

logger = logging.getLogger(__name__)

ATOM_ENTRY_TYPE = 'application/atom+xml;type=entry'
ATOM_TYPE = 'application/atom+xml'

_AUTH_SCHEMES = {
    'basic': HTTPBasicAuth,
    'digest': HTTPDigestAuth,
}


class ConnectionUnavailableError(Exception):
    """The endpoint could not be reached, or the exchange broke off
    """
    pass


def _base_uri(url):
    parts = urlsplit(url)
    return '%s://%s' % (parts.scheme.lower(), parts.netloc.lower())


class ClientResponse:
    """Status and body of one request. Call release() once done with it.
    """
    def __init__(self, response):
        self._response = response
        self.status = response.status_code
        self.status_text = response.reason or ''
        self.released = False

    def document(self):
        """Parse the body as an Atom entry. Raises EntryFormatError, or
        ConnectionUnavailableError if the body could not be read in full.
        """
        try:
            data = self._response.content
        except requests.exceptions.RequestException as e:
            raise ConnectionUnavailableError("Could not read the response from %s: %s" %
                                             (self._response.url, e)) from e
        return Entry.from_xml(data)

    def release(self):
        if not self.released:
            self._response.close()
            self.released = True

    def __repr__(self):
        return 'ClientResponse(%d %s)' % (self.status, self.status_text)


class FeedClient:
    def __init__(self, session=None, timeout=None):
        """timeout is passed through to requests. None means we wait as
        long as the transport does.
        """
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.credentials = {} # map from base uri to requests auth object

    def register_trust_manager(self):
        """Stop verifying server certificates for this client. This allows
        self-signed endpoints, at the cost of trusting any certificate.
        """
        logger.warning("Certificate verification disabled for feed client %s",
                       self)
        self.session.verify = False

    def add_credentials(self, uri, realm, scheme, credentials):
        """Use credentials for every request to the scheme and host of uri.
        realm is accepted for compatibility and not used to select the
        auth: requests answers whichever realm the server challenges with.
        """
        try:
            auth_cls = _AUTH_SCHEMES[scheme.lower()]
        except KeyError:
            raise ValueError("Unsupported auth scheme '%s', expecting one of %s" %
                             (scheme, ', '.join(sorted(_AUTH_SCHEMES)))) from None
        base = _base_uri(uri)
        self.credentials[base] = auth_cls(credentials.username,
                                          credentials.password)
        logger.debug("Registered %s credentials for %s (realm %s)",
                     scheme, base, realm)

    def clear_credentials(self):
        if self.credentials:
            logger.debug("Clearing credentials for %s",
                         ', '.join(sorted(self.credentials)))
        self.credentials.clear()
        self.session.verify = True

    def _auth_for(self, url):
        return self.credentials.get(_base_uri(url))

    def _request(self, method, url, data=None, headers=None):
        try:
            r = self.session.request(method, url, data=data, headers=headers,
                                     auth=self._auth_for(url),
                                     timeout=self.timeout, stream=True)
        except requests.exceptions.RequestException as e:
            raise ConnectionUnavailableError("Could not reach %s: %s" %
                                             (url, e)) from e
        logger.debug("%s %s => %d %s", method, url, r.status_code, r.reason)
        return ClientResponse(r)

    def post(self, url, entry):
        return self._request('POST', url, data=entry.to_xml(),
                             headers={'Content-Type': ATOM_ENTRY_TYPE})

    def get(self, url):
        return self._request('GET', url, headers={'Accept': ATOM_TYPE})

    def put(self, url, entry):
        return self._request('PUT', url, data=entry.to_xml(),
                             headers={'Content-Type': ATOM_ENTRY_TYPE})

    def delete(self, url):
        return self._request('DELETE', url)

    def close(self):
        self.session.close()

    def __str__(self):
        return 'FeedClient(%s)' % ', '.join(sorted(self.credentials))
