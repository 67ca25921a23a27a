"""
Exceptions raised while decoding Nexus plot files.

Decoding is all-or-nothing: every error below aborts the load and no partial
plot is returned. `UnmappedKeyword` is the single non-fatal case and is a
warning category rather than an exception that is raised.
"""


class NexusError(Exception):
    "Base class for all Nexus decoding errors."


class OpenFailure(NexusError, OSError):
    "The plot file could not be opened."


class BadHeader(NexusError, ValueError):
    """
    The stream is not a valid plot file.

    Raised on a magic tag mismatch, an unknown unit system tag, or a header or
    count field that decodes as negative.
    """


class TruncatedInput(NexusError, EOFError):
    "Fewer bytes were available than the current format section requires."


class UnmappedKeyword(UserWarning):
    "A source keyword has no target keyword and was left out of the summary."
