from __future__ import annotations

# npm publish uploads the tarball; registries can be slow under load.
NPM_PUBLISH_TIMEOUT_SECONDS = 10 * 60.0

# npm info / npm dist-tag add
NPM_TIMEOUT_SECONDS = 2 * 60.0
