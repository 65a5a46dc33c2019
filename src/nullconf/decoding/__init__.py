"""Decoding layer: turn loosely-typed mappings into typed structures.

:mod:`~nullconf.decoding.mapper` walks the destination fields and
:mod:`~nullconf.decoding.hook` converts the nullable kinds.
"""
