# Copyright 2016, 2017 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""
This is the main package for feedsink, a connector that publishes stream
records as Atom entries over HTTP. Directly within this package you will
find the following modules:

 * `base` - the stream abstractions the connector plugs into
 * `config` - validation of the connector's key/value configuration
 * `entry` - the Atom entry model
 * `client` - the HTTP transport
 * `sink` - the publish dispatcher and its lifecycle

The `adapters` sub-package connects a sink to an event stream.
"""

__version__ = "1.0.0"
