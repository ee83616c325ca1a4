"""Secret encryption."""

from .cipher import CipherConfig, FernetCipher

__all__ = ["CipherConfig", "FernetCipher"]
