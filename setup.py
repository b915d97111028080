#!/usr/bin/env python
# -*- coding: utf-8 -*-

import re

from os.path import join, dirname

from setuptools import setup

with open(join(dirname(__file__), 'pygraft', '__init__.py'), 'r') as f:
    version = re.match(r".*__version__ = '(.*?)'", f.read(), re.S).group(1)

install_requires = [
    "starlette>=0.27",
    "graphql-core>=3.2,<3.4",
    "pydantic-settings>=2.0",
    "PyJWT>=2.8",
]

dev_requires = [
    "flake8>=3.7.7",
    "pytest>=7.0.0",
    "pytest-asyncio>=0.21",
    "httpx>=0.24",
    "uvicorn>=0.20",
    "passlib[argon2]>=1.7.4",
] + install_requires


setup(name="pygraft",
      version=version,
      description="Single-endpoint GraphQL query server on a typed schema registry",
      long_description=open(join(dirname(__file__), "README.md")).read(),
      long_description_content_type="text/markdown",
      keywords="python graphql",
      packages=['pygraft', 'pygraft.types'],
      license="MIT",
      install_requires=install_requires,
      tests_require=dev_requires,
      python_requires=">=3.8,<4",
      extras_require={
          "dev": dev_requires
      },
      classifiers=[
          "Topic :: Software Development",
          "Development Status :: 3 - Alpha",
          "Intended Audience :: Developers",
          "License :: OSI Approved :: MIT License",
          "Programming Language :: Python :: 3",
          "Programming Language :: Python :: Implementation :: CPython",
      ])
