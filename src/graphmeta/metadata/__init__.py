"""Type metadata: flattened field catalogs and inheritance distance."""

from graphmeta.metadata.field_catalog import FieldCatalog, FieldMap, assign_field, build_field_map
from graphmeta.metadata.type_distance import closest, distance, is_assignable

__all__ = [
    "FieldCatalog",
    "FieldMap",
    "assign_field",
    "build_field_map",
    "closest",
    "distance",
    "is_assignable",
]
