"""Exceptions raised by the map2gaf pipeline."""


class FileOpenError(OSError):
    """A reference, input or output file could not be opened."""

    def __init__(self, path, reason=None):
        self.path = path
        message = f"Could not open file: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class RemoteFetchError(RuntimeError):
    """Downloading the GO term reference file failed."""

    def __init__(self, url, status=None):
        self.url = url
        self.status = status
        super().__init__(f"Can't get url {url} -- {status}")
