"""Project-wide names and environment variables.

Update here to change generated file names or the engine being embedded.
"""

DEFAULT_PACKAGE_NAME = "db"

# Engine release the generator is built against; also the default cache key version.
ENGINE_VERSION = "4bc8b6e1b66cb932731fb1bdbbc550d1e010de81"
PRISMA_VERSION = "5.11.0"

QUERY_ENGINE = "query-engine"

CLIENT_FILENAME = "db_gen.py"
IGNORE_FILENAME = ".gitignore"
GENERATED_SUFFIX = "_gen.py"

ENV_BINARY_TARGETS = "PRISMA_CLI_BINARY_TARGETS"
ENV_ENGINE_TYPE = "PRISMA_CLIENT_ENGINE_TYPE"
ENV_CACHE_DIR = "PRISMA_ENGINES_CACHE_DIR"
ENV_ENGINES_MIRROR = "PRISMA_ENGINES_MIRROR"
ENV_LOG = "PRISMA_CLIENT_GO_LOG"

DEFAULT_ENGINES_MIRROR = "https://binaries.prisma.sh"
DATA_PROXY_SCHEME = "prisma://"
