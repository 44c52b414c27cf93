"""Tern: a tree-walking interpreter for a small dynamically-typed scripting language."""
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
