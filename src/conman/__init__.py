"""Top-level package for conman.

conman installs signed container applications as desktop launchers.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("conman")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "dev"
