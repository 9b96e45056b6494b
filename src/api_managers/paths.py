"""Object path utilities.

Usage-log batches and downloadable files are addressed by a single
``<bucket>/<key>`` string, where the key may itself contain slashes.
"""

from .exceptions import InvalidInputError

PATH_SEPARATOR = "/"


def split_object_path(path: str) -> tuple[str, str]:
    """
    Split an object path into bucket and key.

    Args:
        path: Location in the form ``bucket/key/with/slashes``

    Returns:
        (bucket, key)

    Raises:
        InvalidInputError: If the path has no separator, or an empty
            bucket or key
    """
    if not path:
        raise InvalidInputError(path, "path cannot be empty")

    bucket, separator, key = path.partition(PATH_SEPARATOR)
    if not separator:
        raise InvalidInputError(path, "missing bucket/key separator")
    if not bucket:
        raise InvalidInputError(path, "bucket cannot be empty")
    if not key:
        raise InvalidInputError(path, "key cannot be empty")

    return bucket, key
