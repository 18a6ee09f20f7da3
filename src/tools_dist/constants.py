"""Tools naming, archive and transport constants."""

APP_NAME = "tools-dist"

# Storage layout: tools/juju-<major>.<minor>.<patch>-<series>-<arch>.tgz
TOOLS_DIR = "tools"
TOOLS_NAME_PREFIX = "juju-"
TOOLS_PREFIX = f"{TOOLS_DIR}/{TOOLS_NAME_PREFIX}"
TOOLS_SUFFIX = ".tgz"

# Archive records ignore the builder's umask and account
ARCHIVE_FILE_MODE = 0o755
ARCHIVE_OWNER = "ubuntu"
ARCHIVE_GROUP = "ubuntu"

DOWNLOAD_CHUNK_SIZE = 8192

DEFAULT_BUILD_PACKAGE = "launchpad.net/juju-core/cmd/..."

ENV_VERSION = "TOOLS_DIST_VERSION"
ENV_SERIES = "TOOLS_DIST_SERIES"
ENV_ARCH = "TOOLS_DIST_ARCH"
ENV_LOG_LEVEL = "TOOLS_DIST_LOG_LEVEL"
