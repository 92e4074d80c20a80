"""Build time and tag, stamped into the module at build time."""

BUILD_TIME = ""
BUILD_TAG = ""


def get_build_date_time() -> str:
    """Return the build time stamp, empty if none was set."""
    return BUILD_TIME


def get_build_tag() -> str:
    """Return the build tag, empty if none was set."""
    return BUILD_TAG