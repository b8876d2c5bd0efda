# Copyright 2016 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""
*Adapters* connect a sink to an event stream. *Writers* are input things
that translate each event of a stream into a request to an outside
service. For example, `FeedWriter` publishes every event it receives as
an Atom entry.
"""
