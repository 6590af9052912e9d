#!/usr/bin/env python3

from pathlib import Path

from setuptools import find_namespace_packages, setup


def requires(text):
    return [line.strip() for line in text.splitlines() if line.strip()]


setup(
    name         = "keyverify",
    version      = "0.1.0",
    keywords     = "matrix e2e key verification sas",
    license      = "LGPL-3.0-or-later",

    description                   = "Matrix key verification algorithm types",
    long_description              = Path("README.md").read_text(),
    long_description_content_type = "text/markdown",

    packages         = find_namespace_packages(include=["keyverify*"]),
    python_requires  = ">=3.9, <3.14",
    install_requires = requires("""
        loguru     >= 0.7.0,  < 0.8
        rich       >= 9.13.0
        setuptools >= 40.0.0, < 81
        typingplus >= 2.2.3,  < 3
    """),
    extras_require = {
        "tests": requires("""
            pytest     >= 6.2.1
            pytest-cov >= 2.11.1
        """),
        "dev": requires("""
            flake8                >= 3.8.4
            flake8-bugbear        >= 20.1.4
            flake8-commas         >= 2.0.0
            flake8-comprehensions >= 3.3.0
            flake8-isort          >= 4.0.0
            flake8-quotes         >= 3.2.0
            mypy                  >= 0.812
            pep8-naming           >= 0.11.1
            pytest                >= 6.2.1
            pytest-cov            >= 2.11.1
        """),
    },

    classifiers=[
        "Natural Language :: English",
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Communications :: Chat",
        "Topic :: Security :: Cryptography",

        ("License :: OSI Approved :: "
         "GNU Lesser General Public License v3 or later (LGPLv3+)"),

        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
    ],
)
