"""Build files and the builds resolved from them."""

from .models import Build, BuildFile, BuildFileType

__all__ = ["Build", "BuildFile", "BuildFileType"]
