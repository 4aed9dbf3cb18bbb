"""Descriptors: catalog, bundle resolution and selection.

Architecture::

    models.py      Descriptor, DescriptorMatch, DescriptorBundle, DEFAULT_DESCRIPTOR
    catalog.py     DescriptorCatalog (flat directory of descriptor*.json)
    bundles.py     BundleResolver (descriptor → existing bundle file)
    matcher.py     DescriptorMatcher (explicit → dependency → default)
"""

from descriptor_spine.descriptors.bundles import BundleResolver
from descriptor_spine.descriptors.catalog import DESCRIPTOR_PREFIX, DescriptorCatalog
from descriptor_spine.descriptors.matcher import DescriptorMatcher
from descriptor_spine.descriptors.models import (
    DEFAULT_DESCRIPTOR,
    Descriptor,
    DescriptorBundle,
    DescriptorMatch,
)

__all__ = [
    "DEFAULT_DESCRIPTOR",
    "DESCRIPTOR_PREFIX",
    "Descriptor",
    "DescriptorBundle",
    "DescriptorMatch",
    "DescriptorCatalog",
    "BundleResolver",
    "DescriptorMatcher",
]
