# agricraft/errors.py


class AgriCraftError(Exception):
    """Base class for every failure surfaced to the API caller."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AgriCraftError):
    """Bad file type/name, price, phone or form field. The call is never attempted."""

    status_code = 400


class DecodeError(AgriCraftError):
    """Source bytes are not a readable image."""

    status_code = 422


class EncodeError(AgriCraftError):
    """The encoder could not produce output at some quality step."""

    status_code = 422


class StreamReadError(AgriCraftError):
    """The AI endpoint answered with a failure status or the response body broke mid-read."""

    status_code = 502


class NetworkError(AgriCraftError):
    """The AI endpoint could not be reached."""

    status_code = 502


class StorageError(AgriCraftError):
    """Object storage rejected or failed the operation."""

    status_code = 502
