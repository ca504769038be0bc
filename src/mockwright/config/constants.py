"""Configuration constants.

Values that should NOT be user-configurable: Go source conventions the
scanner and the registration matcher rely on.
"""

# =============================================================================
# Source Tree Scanning
# =============================================================================

SOURCE_SUFFIX = ".go"
"""Only files with this suffix are parsed."""

TEST_SUFFIX = "_test.go"
"""Test files are never parsed, even though they carry SOURCE_SUFFIX."""

SKIPPED_PREFIXES = (".", "_")
"""Entries (files or directories) starting with these are never visited."""

# =============================================================================
# Registration Matching
# =============================================================================

GETTER_PREFIX = "Get"
"""Provider functions start with this prefix; the first result names the interface."""

IN_MARKER = "In"
"""Selector name of the embedded parameter-object marker (e.g. dig.In)."""

DI_SUPPORT_IMPORT = "github.com/17media/api/setup/dimanager"
"""Second import of the registration file."""

# =============================================================================
# Output Defaults
# =============================================================================

DEFAULT_OUTPUT_DIR = "./mocks"
DEFAULT_MOCK_PACKAGE = "mocks"
DEFAULT_REGISTER_PATH = "./mocks/register.go"

TESTIFY_MOCK_IMPORT = "github.com/stretchr/testify/mock"
GENERATED_BANNER = "// Code generated by mockwright. DO NOT EDIT."
