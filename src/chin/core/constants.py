"""
CHIN format constants, record structs and part-naming patterns.
"""
import re
import struct

# Archive file suffix
ARCHIVE_SUFFIX = ".chin"

# Record layout: path_len(2) + path + content_len(4) + content
PATH_LEN_STRUCT = struct.Struct("<H")
CONTENT_LEN_STRUCT = struct.Struct("<I")

PATH_LEN_SIZE = PATH_LEN_STRUCT.size  # 2 bytes
CONTENT_LEN_SIZE = CONTENT_LEN_STRUCT.size  # 4 bytes

# Validation constants
MAX_PATH_LENGTH = 0xFFFF  # Max path bytes (uint16)
MAX_CONTENT_LENGTH = 0xFFFFFFFF  # Max content bytes (uint32)

# Content length 0 marks a directory entry
DIRECTORY_MARKER = 0

# Split settings
BYTES_PER_MB = 1024 * 1024
PART_PROBE_SIZE = 10  # bytes read from each part before joining
OVERSIZED_LAST_PART_FACTOR = 2

# Any name that looks like a part: "...-<digits>.chin"
SPLIT_NAME_HINT = re.compile(r"-\d+\.chin$")
# Strict part name: "<base>-<N>.chin", N starting at 1, no leading zeros
PART_NAME_PATTERN = re.compile(r"^(?P<base>.+)-(?P<index>[1-9]\d*)\.chin$")

# Suffix appended to the first source's stem when packing several sources
MULTI_SOURCE_SUFFIX = "-all"
