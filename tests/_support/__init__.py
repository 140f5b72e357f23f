"""
Test support package for burrow tests.

Sample kinds live in :mod:`tests._support.kinds`, the module loaded by
``load_models`` tests in :mod:`tests._support.models`, and storage doubles
in :mod:`tests._support.storage`.
"""
