"""
collection-forge: schema-governed collections for Django.

Collections declare their fields and per-field permission groups; mutators
create, update and delete documents through a validation, callback and read
restriction pipeline; a GraphQL schema and a form wrapper sit on top.
"""

from .defaults import LIBRARY_VERSION

__version__ = LIBRARY_VERSION
