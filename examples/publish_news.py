# Copyright 2016 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""Publish a short stream of news items to an Atom endpoint.

Usage: python publish_news.py URL [USERNAME PASSWORD]

The server is expected to answer each POST with 201 Created.
"""
import sys
import logging

from feedsink.base import from_list, run_to_completion
from feedsink.adapters.atom import FeedWriter

logging.basicConfig(level=logging.DEBUG)

news = [
    {'title': 'Sensor network online', 'summary': 'All nodes reporting',
     'author': 'ops'},
    {'title': 'Lux threshold exceeded', 'summary': 'Node 3 above 800 lux',
     'author': 'ops'},
]

def main(argv=sys.argv[1:]):
    if len(argv) not in (1, 3):
        print(__doc__)
        return 1
    options = {'url': argv[0], 'atom.func': 'create'}
    if len(argv)==3:
        options['username'] = argv[1]
        options['password'] = argv[2]
    writer = FeedWriter.from_options('newsStream', options)
    source = from_list(news)
    source.connect(writer)
    run_to_completion(source)
    print("Published %d entries, %d failed" %
          (writer.outcomes['success'], writer.outcomes['failure']))
    return 0

if __name__ == '__main__':
    sys.exit(main())
