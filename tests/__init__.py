"""
Test package root.

Only this directory carries an __init__.py; subdirectories are namespace packages (PEP 420).
Keeping `tests` a package lets test modules import shared helpers as `tests.helpers...`.
"""
