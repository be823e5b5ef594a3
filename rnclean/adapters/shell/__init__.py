"""Shell adapters — commands and filesystem removal."""
