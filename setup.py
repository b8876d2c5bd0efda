#!/usr/bin/env python
# Copyright 2016,2017 by MPI-SWS and Data-Ken Research.
# Licensed under the Apache 2.0 License.
"""Setup script for the feedsink distribution. Note that we only
package up the python code. The tests and examples are kept only in
the full source repository.
"""

import re
from setuptools import setup

with open('feedsink/__init__.py') as f:
    __version__ = re.search(r'^__version__ = "([^"]+)"', f.read(), re.M).group(1)

DESCRIPTION =\
"""
feedsink is a (Python3) connector that publishes the events of a stream
processing pipeline as Atom entries. Every event becomes exactly one
create (POST), update (GET then PUT) or delete (DELETE) against an Atom
endpoint, optionally with basic-auth credentials, and the server's
response is checked against an expected status code.
"""

setup(name='feedsink',
      version=__version__,
      description="Publish event streams as Atom feed entries",
      long_description=DESCRIPTION,
      license="Apache 2.0",
      packages=['feedsink', 'feedsink.adapters'],
      python_requires='>=3.8',
      install_requires=['requests>=2.20', 'defusedxml>=0.7'],
      extras_require={
          'test': ['pytest'],
      },
      classifiers = [
          'Development Status :: 4 - Beta',
          'License :: OSI Approved :: Apache Software License',
          'Programming Language :: Python :: 3',
          'Operating System :: OS Independent',
          'Intended Audience :: Developers' ,
      ],
      keywords = ['events', 'atom', 'feeds', 'atompub'],
)
