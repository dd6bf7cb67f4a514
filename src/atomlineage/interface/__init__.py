"""User-facing surfaces over the lineage domain."""
