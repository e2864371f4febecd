"""Error types raised by queuecast operations."""


class QueuecastError(Exception):
    """Base class for all errors reported to the command surface."""


class InvalidInputError(QueuecastError):
    """Bad or missing directory, or malformed arguments."""


class DirectoryNotFoundError(InvalidInputError):
    """The given path does not exist."""


class PathNotADirectoryError(InvalidInputError):
    """The given path exists but is not a directory."""


class ProgramExistsError(InvalidInputError):
    """A program with the same hash is already in the catalog."""

    def __init__(self, program_hash: str, name: str):
        super().__init__(
            f"Program '{name}' already exists with hash '{program_hash}' (use --replace to overwrite)"
        )
        self.program_hash = program_hash
        self.name = name


class ProgramNotFoundError(QueuecastError):
    """No program in the catalog has the given hash."""

    def __init__(self, program_hash: str):
        super().__init__(f"Program not found: {program_hash}")
        self.program_hash = program_hash


class NoMediaFoundError(QueuecastError):
    """A directory holds no recognised video files."""


class ConfigurationMissingError(QueuecastError):
    """A required setting (such as the symlink directory) was never configured."""


class FilesystemError(QueuecastError):
    """An I/O failure while reading, writing, linking or removing files."""


class SerializationError(QueuecastError):
    """The catalog file is corrupt or cannot be decoded."""
