"""Per-path sequence allocation for minted addresses."""
