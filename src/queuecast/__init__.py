"""queuecast - weekly broadcast scheduling for on-disk episode directories."""

__version__ = "0.1.0"
