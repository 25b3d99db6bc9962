"""Source parsing, key derivation and catalog I/O."""
