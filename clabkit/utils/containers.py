"""Helpers for container image names and CNI paths."""

from __future__ import annotations

import os

_CNI_BIN = "/opt/cni/bin"


def get_canonical_image_name(image_name: str) -> str:
    """Return the fully qualified image name, with the ``latest`` tag if none is given.

    ``alpine`` becomes ``docker.io/library/alpine:latest``, ``foo/bar``
    becomes ``docker.io/foo/bar:latest``, while names that already carry a
    registry host are kept as they are.
    """
    canonical = image_name
    slash_count = image_name.count("/")
    if slash_count == 0:
        canonical = "docker.io/library/" + image_name
    elif slash_count == 1:
        first = image_name.split("/", 1)[0]
        if "." not in first:
            canonical = "docker.io/" + image_name
    if ":" not in canonical:
        canonical += ":latest"
    return canonical


def get_cni_binary_path() -> str:
    """Return the directory holding CNI plugins, overridable with ``CNI_BIN``."""
    return os.environ.get("CNI_BIN", _CNI_BIN)