"""pnlock.constants — Well-known file names and field lists."""

WANTED_LOCKFILE = "pnpm-lock.yaml"
CURRENT_LOCKFILE = "lock.yaml"

# Current lockfile format written by pnpm 8
LOCKFILE_VERSION = "6.0"

# 6.1 was a short-lived transitional format; no downgrade warning for it
TRANSITIONAL_LOCKFILE_VERSION = "6.1"

DEPENDENCIES_FIELDS = (
    "optionalDependencies",
    "dependencies",
    "devDependencies",
)

ROOT_IMPORTER_ID = "."

INLINE_SPECIFIERS_SUFFIX = "-inlineSpecifiers"
