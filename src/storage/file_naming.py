"""
File naming conventions of the storage engine.

Base files are named ``<file_id>_<write_token>_<instant>.<ext>`` and log
files ``.<file_id>_<instant>.log.<version>_<write_token>``. Only the file id
is needed to locate a record's file group.
"""

import posixpath


def file_id_from_name(file_name: str) -> str:
    """
    Extract the file group id from a stored file name.

    Args:
        file_name: Base or log file name, optionally with a directory prefix

    Returns:
        The file id portion of the name
    """
    name = posixpath.basename(file_name.strip())
    if name.startswith(".") and ".log." in name:
        name = name[1:]
    file_id, sep, _ = name.partition("_")
    if sep:
        return file_id
    # Not written by the engine; fall back to the bare stem
    return posixpath.splitext(file_id)[0]
