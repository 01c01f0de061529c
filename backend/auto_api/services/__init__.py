"""
Services of the Auto API.

- domain: read/write services, search predicate builder, version codec
- crud: cascading delete of the aggregate
- notification: mail on create
"""
