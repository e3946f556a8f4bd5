#!/usr/bin/env python
from setuptools import setup

def find_version(path):
    import re
    # path shall be a plain ascii text file.
    s = open(path, 'rt').read()
    version_match = re.search(r"^__version__ = ['\"]([^'\"]*)['\"]",
                              s, re.M)
    if version_match:
        return version_match.group(1)
    raise RuntimeError("Version not found")

setup(name="tapead", version=find_version("tapead/version.py"),
      description="Reverse mode automatic differentiation on a Wengert tape",
      zip_safe=True, # this should be pure python
      packages=["tapead",
                "tapead.tests",
               ],
      license='GPLv3',
      python_requires='>=3.6',
      install_requires=['numpy'],
      extras_require={
          'graph' : ['graphviz'],
          'test' : ['pytest', 'graphviz'],
      },
      )
