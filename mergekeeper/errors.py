"""Exception hierarchy shared by all mergekeeper modules."""


class MergeKeeperError(Exception):
    """Base for errors raised by mergekeeper."""

    pass
