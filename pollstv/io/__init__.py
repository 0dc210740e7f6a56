"""Input/output of polls in ballot file formats.

This subpackage is structured into modules by file format: :mod:`csv` for the
poll export format and :mod:`blt` for the BLT format used by many STV
counting programs. Both provide ``load()``/``loads()`` returning an
:class:`pollstv.io.core.ElectionData` and ``dump()``/``dumps()``.
"""
