"""
Application constants and metadata.
"""

# Application info
APP_NAME = "tomltree"
APP_VERSION = "0.1.0"
APP_DESCRIPTION = "TOML-style configuration parser with dotted-path lookup"

# Default values
DEFAULT_FILENAME = "<string>"
DEFAULT_ENCODING = "utf-8"
