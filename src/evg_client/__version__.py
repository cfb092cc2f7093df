"""Version information for evg-client.

Single source of truth for version number.
Follows PEP 440 and semantic versioning principles.
"""

__version__ = "0.3.0"
__version_info__ = tuple(int(part) for part in __version__.split("."))

# Version history:
# 0.3.0 - Project listing, stats queries, CLI
# 0.2.0 - Lazy page streams and log line streaming
# 0.1.0 - Initial release (task, version, build lookups)
