# Copyright 2016,2017 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""
Configuration of a feed connector. The host hands us key/value strings
through an object with a get(key, default) method (a dict is fine). They are
validated once, into an immutable ConnectorConfig, before any event is
published. Any problem raises ConfigError, which is fatal.

Option keys:

 * url                     - the feed endpoint (http or https)
 * atom.func               - create, update or delete (default create)
 * username, password      - optional basic-auth credentials
 * http.response.code      - the status the server must answer with (default 201)
 * trust.all.certificates  - when credentials are given, skip certificate
                             verification (default true). This lets
                             self-signed test servers work but gives up
                             protection against man-in-the-middle attacks.
"""
import logging
import re
from collections import namedtuple
from enum import Enum
from urllib.parse import urlsplit

from feedsink.base import FatalError

logger = logging.getLogger(__name__)

URL = 'url'
ATOM_FUNC = 'atom.func'
USERNAME = 'username'
PASSWORD = 'password'
HTTP_RESPONSE_CODE = 'http.response.code'
TRUST_ALL = 'trust.all.certificates'

NOT_SET = '<not set>'
HTTP_CREATED = 201

_STATUS_RE = re.compile(r"\d{3}", re.ASCII)


class ConfigError(FatalError):
    pass


class OperationMode(Enum):
    CREATE = 'create'
    UPDATE = 'update'
    DELETE = 'delete'


class Credentials(namedtuple('Credentials', ['username', 'password'])):
    __slots__ = ()

    def __repr__(self):
        return 'Credentials(username=%r, password=***)' % self.username


ConnectorConfig = namedtuple('ConnectorConfig',
                             ['stream_id', 'endpoint', 'operation_mode',
                              'credentials', 'expected_status', 'trust_all'])


def is_valid_url(raw):
    """True if raw is an absolute http(s) URL with a host. Never raises.
    """
    if not isinstance(raw, str) or raw.strip()!=raw or raw=='':
        return False
    try:
        parts = urlsplit(raw)
        parts.port # raises ValueError on a non-numeric or out of range port
    except ValueError:
        return False
    return parts.scheme in ('http', 'https') and bool(parts.hostname)


def parse_endpoint(raw, stream_id=None):
    if not is_valid_url(raw):
        raise ConfigError("Url syntax error in %s. Given value %r" %
                          (stream_id, raw))
    return raw


def parse_operation_mode(raw, stream_id=None, default=OperationMode.CREATE.value):
    if raw is None:
        raw = default
    try:
        return OperationMode(str(raw).lower())
    except ValueError:
        raise ConfigError("Atom function validation error in %s. Given value %r, "
                          "acceptance parameters are 'create', 'delete', 'update'" %
                          (stream_id, raw)) from None


def parse_credentials(username, password, sentinel=NOT_SET):
    """Return Credentials if at least one of username/password was given,
    otherwise None. A side that was not given becomes the empty string.
    """
    missing = (sentinel, None)
    if username in missing and password in missing:
        return None
    return Credentials('' if username in missing else username,
                       '' if password in missing else password)


def parse_expected_status(raw, stream_id=None, default=HTTP_CREATED):
    if raw is None:
        return default
    text = str(raw).strip()
    if not _STATUS_RE.fullmatch(text):
        raise ConfigError("Http response code in %s is not a three digit integer: %r" %
                          (stream_id, raw))
    status = int(text)
    if not (100 <= status <= 599):
        raise ConfigError("Http response code in %s is out of range: %d" %
                          (stream_id, status))
    return status


def parse_trust_all(raw, stream_id=None, default='true'):
    if raw is None:
        raw = default
    value = str(raw).strip().lower()
    if value=='true':
        return True
    elif value=='false':
        return False
    raise ConfigError("%s in %s must be 'true' or 'false', got %r" %
                      (TRUST_ALL, stream_id, raw))


def config_from_options(stream_id, options):
    """Validate the options and build the connector configuration.
    options must provide get(key, default).
    """
    endpoint = parse_endpoint(options.get(URL, None), stream_id)
    mode = parse_operation_mode(options.get(ATOM_FUNC, OperationMode.CREATE.value),
                                stream_id)
    credentials = parse_credentials(options.get(USERNAME, NOT_SET),
                                    options.get(PASSWORD, NOT_SET))
    expected_status = parse_expected_status(options.get(HTTP_RESPONSE_CODE,
                                                        str(HTTP_CREATED)),
                                            stream_id)
    trust_all = parse_trust_all(options.get(TRUST_ALL, 'true'), stream_id)
    config = ConnectorConfig(stream_id, endpoint, mode, credentials,
                             expected_status, trust_all)
    logger.info("Configured feed connector for %s: %s %s, expecting %d%s",
                stream_id, mode.value, endpoint, expected_status,
                ' (with credentials)' if credentials else '')
    return config
