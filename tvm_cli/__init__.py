"""Command line surface for tvm."""
