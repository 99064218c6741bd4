"""Container format and the compress/decompress entry points."""
