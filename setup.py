#!/usr/bin/env python

from setuptools import setup
from glob import glob

version_file = 'src/lib/PkgSync/version.py'
exec(compile(open(version_file).read(), version_file, 'exec'))

inst_reqs = [
    'lxml',
]

setup(name="pkgsync",
      version=__version__,  # Defined in src/lib/PkgSync/version.py
      description="Desired-state package management for FreeBSD pkg",
      packages=["PkgSync",
                "PkgSync.Options",
                "PkgSync.Providers",
                ],
      install_requires=inst_reqs,
      tests_require=['mock', 'pytest'],
      extras_require={'test': ['mock', 'pytest']},
      package_dir={'': 'src/lib', },
      scripts=glob('src/sbin/*'),
      )
