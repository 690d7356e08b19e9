"""
Default key layout shared with the write-side persistence component.
"""

KEY_PREFIX = "persist:"

DEFAULT_COMMON_KEYS_PREFIX = "common"
DEFAULT_DYN_PREFIX = "@garbage"

# Sub-directory of the storage root used by the default file storage
DEFAULT_STORAGE_NAMESPACE = "local"
