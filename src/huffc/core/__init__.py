"""Huffman tree, code tables and bit packing."""
