"""Routing: path normalization, pattern parsing and the trie matcher.

Patterns use ``:name`` for single-segment parameters and a trailing
``*`` for the rest of the path.
"""
