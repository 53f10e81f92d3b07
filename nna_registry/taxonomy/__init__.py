"""Taxonomy resolution and dual addressing.

Catalog tree, bidirectional code resolver, scoped override table,
validator and HFN/MFA address codec, bundled per catalog version by
TaxonomyEngine.
"""
