"""Test package marker.

Keeps ``tests`` importable as a package so ``tests/conftest.py`` loads under a
stable module name alongside the unit suites in ``tests/unit``.
"""
