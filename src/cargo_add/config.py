MANIFEST_FILENAME = "Cargo.toml"
LOCK_FILENAME = "Cargo.lock"
PRIMARY_SECTIONS = ("package", "project")

DEPENDENCIES = "dependencies"
DEV_DEPENDENCIES = "dev-dependencies"
BUILD_DEPENDENCIES = "build-dependencies"

DEFAULT_VERSION_REQ = "*"
