#!/usr/bin/env python3
"""
CMXCTL IGNORE FILES
-------------------
Static boilerplate written by `init-kots-app`: the chart's .helmignore
entry, the kots/ .gitignore and the release Makefile.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from cmxctl.core.errors import ScaffoldError

logger = logging.getLogger("cmxctl.scaffold")

HELMIGNORE_ENTRY = "kots/"
HELMIGNORE_CONTENTS = "\n" + HELMIGNORE_ENTRY

GITIGNORE_CONTENTS = """
deps/
manifests/*.tgz
"""

MAKEFILE_CONTENTS = """
SHELL := /bin/bash -o pipefail

app_slug := "${REPLICATED_APP}"

# Generate channel and release notes. Github Actions checkouts need the GITHUB_* variables.
ifeq ($(origin GITHUB_ACTIONS), undefined)
release_notes := "CLI release of $(shell git symbolic-ref HEAD) triggered by ${shell git config --global user.name}: $(shell basename $$(git remote get-url origin) .git) [SHA: $(shell git rev-parse HEAD)]"
channel := $(shell git rev-parse --abbrev-ref HEAD)
else
release_notes := "GitHub Action release of ${GITHUB_REF} triggered by ${GITHUB_ACTOR}: [$(shell echo $${GITHUB_SHA::7})](https://github.com/${GITHUB_REPOSITORY}/commit/${GITHUB_SHA})"
channel := ${GITHUB_BRANCH_NAME}
endif

# master releases go to the Unstable channel
ifeq ($(channel), master)
channel := Unstable
endif

# version based on branch/channel
version := $(channel)-$(shell git rev-parse HEAD | head -c7)$(shell git diff --no-ext-diff --quiet --exit-code || echo "-dirty")

.PHONY: deps-vendor-cli
deps-vendor-cli: upstream_version = $(shell  curl --silent --location --fail --output /dev/null --write-out %{url_effective} https://github.com/replicatedhq/replicated/releases/latest | grep -Eo '[0-9]+\\.[0-9]+\\.[0-9]+$$')
deps-vendor-cli: dist = $(shell uname | tr '[:upper:]' '[:lower:]')
deps-vendor-cli: cli_version = ""
deps-vendor-cli: cli_version = $(shell [[ -x deps/replicated ]] && deps/replicated version | grep version | head -n1 | cut -d: -f2 | tr -d , | tr -d '"' | tr -d " " )

deps-vendor-cli:
\t: CLI Local Version $(cli_version)
\t: CLI Upstream Version $(upstream_version)
\t@if [[ "$(cli_version)" == "$(upstream_version)" ]]; then \\
\t   echo "Latest CLI version $(upstream_version) already present"; \\
\t else \\
\t   echo '-> Downloading Replicated CLI to ./deps '; \\
\t   mkdir -p deps/; \\
\t   curl -s https://api.github.com/repos/replicatedhq/replicated/releases/latest \\
\t   | grep "browser_download_url.*$(dist)_amd64.tar.gz" \\
\t   | cut -d : -f 2,3 \\
\t   | tr -d \\" \\
\t   | wget -O- -qi - \\
\t   | tar xvz -C deps; \\
\t fi


.PHONY: lint
lint: check-api-token check-app deps-vendor-cli
\tdeps/replicated release lint --app $(app_slug) --yaml-dir manifests

.PHONY: check-api-token
check-api-token:
\t@if [ -z "${REPLICATED_API_TOKEN}" ]; then echo "Missing REPLICATED_API_TOKEN"; exit 1; fi

.PHONY: check-app
check-app:
\t@if [ -z "$(app_slug)" ]; then echo "Missing REPLICATED_APP"; exit 1; fi

.PHONY: list-releases
list-releases: check-api-token check-app deps-vendor-cli
\tdeps/replicated release ls --app $(app_slug)

.PHONY: helm-package
helm-package: deps-vendor-cli
\thelm package ../. -d manifests/

.PHONY: release
release: check-api-token check-app deps-vendor-cli helm-package lint
\tdeps/replicated release create \\
\t\t--app $(app_slug) \\
\t\t--yaml-dir manifests \\
\t\t--promote $(channel) \\
\t\t--version $(version) \\
\t\t--release-notes $(release_notes) \\
\t\t--ensure-channel

.PHONY: release-kurl-installer
release-kurl-installer: check-api-token check-app deps-vendor-cli
\tdeps/replicated installer create \\
\t\t--app $(app_slug) \\
\t\t--yaml-file kurl-installer.yaml \\
\t\t--promote $(channel) \\
\t\t--ensure-channel
"""


def read_helmignore(base_dir: Union[str, Path]) -> Optional[str]:
    """Returns the chart's .helmignore text, or None when the file does not exist."""
    path = Path(base_dir) / ".helmignore"
    if not path.exists():
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ScaffoldError(f"Unable to read {path}: {e}") from e


def write_helmignore(base_dir: Union[str, Path]) -> Path:
    """
    Makes the chart's .helmignore skip the kots/ directory.

    The file is created when missing; the entry is appended only when it
    is not already present, so repeated runs leave the file unchanged.
    """
    path = Path(base_dir) / ".helmignore"
    existing = read_helmignore(base_dir) or ""

    if HELMIGNORE_ENTRY in existing:
        logger.debug(f"{path} already ignores {HELMIGNORE_ENTRY}")
        return path

    with path.open("a", encoding="utf-8") as f:
        f.write(HELMIGNORE_CONTENTS)
    logger.info(f"Added {HELMIGNORE_ENTRY} to {path}")
    return path


def write_gitignore(kots_dir: Union[str, Path]) -> Path:
    """Overwrites kots/.gitignore with the vendored CLI and chart archive patterns."""
    path = Path(kots_dir) / ".gitignore"
    path.write_text(GITIGNORE_CONTENTS, encoding="utf-8")
    return path


def write_makefile(kots_dir: Union[str, Path]) -> Path:
    path = Path(kots_dir) / "Makefile"
    path.write_text(MAKEFILE_CONTENTS, encoding="utf-8")
    return path
