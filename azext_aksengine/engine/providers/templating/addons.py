# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from typing import Callable, Dict, NamedTuple, Optional, Tuple

from knack.log import get_logger

from .models import AddonContainer, ClusterProperties, KubernetesAddon
from .user_strings import ADDON_CONTAINER_NOT_FOUND_ERROR

logger = get_logger(__name__)

# addon name -> (source manifest asset, destination file on the master)
DEFAULT_ADDON_FILES: Dict[str, Tuple[str, str]] = {
    "heapster": ("kubernetesmasteraddons-heapster-deployment.yaml", "kube-heapster-deployment.yaml"),
    "kube-dns": ("kubernetesmasteraddons-kube-dns-deployment.yaml", "kube-dns-deployment.yaml"),
    "metrics-server": (
        "kubernetesmasteraddons-metrics-server-deployment.yaml",
        "kube-metrics-server-deployment.yaml",
    ),
    "tiller": ("kubernetesmasteraddons-tiller-deployment.yaml", "kube-tiller-deployment.yaml"),
}


class AddonSetting(NamedTuple):
    is_enabled: bool
    source_file: str
    destination_file: str
    raw_script: Optional[str] = None


def build_addon_settings(
    properties: ClusterProperties, addon_files: Optional[Dict[str, Tuple[str, str]]] = None
) -> Dict[str, AddonSetting]:
    if addon_files is None:
        addon_files = DEFAULT_ADDON_FILES

    settings = {}
    for addon in properties.get_addons():
        if addon.name not in addon_files:
            logger.warning("Addon %s has no known manifest and will not be installed.", addon.name)
            continue
        source_file, destination_file = addon_files[addon.name]
        settings[addon.name] = AddonSetting(
            is_enabled=addon.enabled,
            source_file=source_file,
            destination_file=destination_file,
            raw_script=addon.data or None,
        )
    return settings


def get_addon_func_map(addon: KubernetesAddon) -> Dict[str, Callable]:
    def _get_container(name: str) -> AddonContainer:
        index = addon.get_container_index_by_name(name)
        if index < 0:
            raise ValueError(ADDON_CONTAINER_NOT_FOUND_ERROR.format(name, addon.name))
        return addon.containers[index]

    return {
        "ContainerImage": lambda name: _get_container(name).image,
        "ContainerCPUReqs": lambda name: _get_container(name).cpu_requests,
        "ContainerCPULimits": lambda name: _get_container(name).cpu_limits,
        "ContainerMemReqs": lambda name: _get_container(name).memory_requests,
        "ContainerMemLimits": lambda name: _get_container(name).memory_limits,
        "ContainerConfig": lambda name: (addon.config or {}).get(name, ""),
    }
