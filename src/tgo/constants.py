# --- Log and Debug ---
# Short aliases for module names to keep CLI/env concise
LOG_ALIAS_MAP = {
    "conf": "tgo.config",
    "cfg": "tgo.config",
    "layout": "tgo.layout",
    "lay": "tgo.layout",
    "mirror": "tgo.mirror",
    "mir": "tgo.mirror",
    "env": "tgo.env",
    "run": "tgo.runner",
    "runner": "tgo.runner",
    "tc": "tgo.toolchain",
    "go": "tgo.toolchain",
    "cache": "tgo.cache",
    "life": "tgo.lifecycle",
    "io": "tgo.io",
    "fs": "tgo.io.fs",
    "cli": "tgo.cli",
}

# Top-level modules within tgo for auto-prefixing
KNOWN_TOP_MODULES = {
    "cache",
    "cli",
    "config",
    "env",
    "exceptions",
    "io",
    "layout",
    "lifecycle",
    "mirror",
    "runner",
    "toolchain",
    "utils",
}

LOG_LEVELS_ENV = "TGO_LOG_LEVELS"

# --- Cache Layout ---
CACHE_MARKER = ".tgo"
CACHE_ROOT_DIRNAME = "root"
CONFIG_FILENAME = "config.yaml"
VCS_DIRNAME = ".git"

# --- Record Keys ---
PKG_DIR_KEY = "pkgdir"
GO_CACHE_KEY = "gocache"
GO_PATH_KEY = "gopath"

# --- Toolchain ---
GO_BINARY = "go"
GO_BINARY_ENV = "TGO_GO"
GOROOT = "GOROOT"
GOPATH = "GOPATH"
GOCACHE = "GOCACHE"
PWD = "PWD"

DEFAULT_BUILD_ARGS = ["build", "./..."]
LIST_DIRS_ARGS = ["list", "-f", "{{.Dir}}", "all", "./..."]

# go subcommands forwarded to `go` verbatim
GO_SUBCOMMANDS = {
    "bug",
    "build",
    "doc",
    "env",
    "fix",
    "fmt",
    "generate",
    "get",
    "install",
    "list",
    "mod",
    "run",
    "test",
    "tool",
    "version",
    "vet",
    "help",
}
