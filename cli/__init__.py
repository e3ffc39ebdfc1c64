"""Command line interface for Recipe Codegen."""
