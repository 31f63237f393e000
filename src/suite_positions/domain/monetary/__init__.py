"""Monetary domain package.

This package contains the currency registry, the ISO 4217 table loader and the
canonical `Currency` handles that cash instruments are built on.
"""
