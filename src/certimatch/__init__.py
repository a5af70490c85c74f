"""CertiMatch - Appariement des destinataires et de leurs certificats."""

from certimatch.config import CertiMatchError, ConfigError, ConfigFileError
from certimatch.io_excel import SpreadsheetFileError

__all__ = [
    "__version__",
    "CertiMatchError",
    "ConfigError",
    "ConfigFileError",
    "SpreadsheetFileError",
]

__version__ = "0.1.0"
