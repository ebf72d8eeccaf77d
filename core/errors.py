#!/usr/bin/env python3
"""
Errors Module
Exception types raised by the conversion pipeline.

Node-level problems (missing assets, unknown properties, unresolved action
tags) are never raised; they are recorded as diagnostics instead.
"""


class ConversionError(Exception):
    """Base class for all conversion failures"""


class ParseError(ConversionError):
    """A source document is malformed or of an unknown kind

    Document-fatal: the document is skipped and the batch continues.
    """

    def __init__(self, message, file_path=None):
        super().__init__(message)
        self.file_path = file_path

    def __str__(self):
        message = super().__str__()
        if self.file_path:
            return f"{self.file_path}: {message}"
        return message


class CyclicReferenceError(ConversionError):
    """A document embeds itself, directly or through other documents"""

    def __init__(self, chain):
        self.chain = list(chain)
        super().__init__("Cyclic document reference: " + " -> ".join(self.chain))


class ArtifactWriteError(ConversionError):
    """An output directory or artifact could not be written

    Resource-fatal: aborts the whole run.
    """
