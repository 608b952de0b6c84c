"""
combiner - concatenate the text files of a project into one LLM-ready file.

Walks a directory tree, filters entries with prefix/suffix/wildcard ignore
rules, writes every accepted text file into a single output artifact and
reports file and token statistics.
"""

__version__ = "0.1.0"
