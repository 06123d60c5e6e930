# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import json
from typing import Optional

from azure.cli.core.azclierror import InvalidArgumentValueError
from knack.log import get_logger
from rich.console import Console

from .providers.templating import (
    ClusterProperties,
    ExtensionResolver,
    TemplateAssembler,
    generate_kubeconfig,
    get_base64_custom_script_from_str,
)
from .util import deserialize_file_content, read_file_content

logger = get_logger(__name__)

CONFIG_ROOT_LABEL = "aksengine"
CONFIG_TIMEOUT_LABEL = "extension_timeout"

console = Console(stderr=True)


def _load_properties(cluster_spec_file: str) -> ClusterProperties:
    content = deserialize_file_content(cluster_spec_file)
    if not isinstance(content, dict):
        raise InvalidArgumentValueError(f"Cluster spec {cluster_spec_file} must be a json or yaml object.")
    return ClusterProperties.from_dict(content)


def _get_extension_timeout(cmd) -> Optional[int]:
    return cmd.cli_ctx.config.getint(CONFIG_ROOT_LABEL, CONFIG_TIMEOUT_LABEL, fallback=None)


def render_template(
    cmd,
    cluster_spec_file: str,
    template_name: str,
    profile_index: Optional[int] = None,
    single_line: Optional[bool] = None,
) -> str:
    properties = _load_properties(cluster_spec_file)
    profile = properties.master_profile
    if profile_index is not None:
        if not 0 <= profile_index < len(properties.agent_pool_profiles):
            raise InvalidArgumentValueError(
                f"Agent pool index {profile_index} is out of range, "
                f"the cluster spec defines {len(properties.agent_pool_profiles)} agent pool(s)."
            )
        profile = properties.agent_pool_profiles[profile_index]

    assembler = TemplateAssembler(properties, timeout=_get_extension_timeout(cmd))
    if single_line:
        return assembler.render_single_line(template_name, profile)
    return assembler.render(template_name, profile)


def show_kubeconfig(cmd, cluster_spec_file: str, location: str) -> dict:
    properties = _load_properties(cluster_spec_file)
    return json.loads(generate_kubeconfig(properties, location))


def resolve_extensions(cmd, cluster_spec_file: str, no_progress: Optional[bool] = None) -> str:
    properties = _load_properties(cluster_spec_file)
    resolver = ExtensionResolver(properties, timeout=_get_extension_timeout(cmd))
    if no_progress:
        return resolver.get_linked_templates()

    with console.status(f"Resolving {len(properties.extension_profiles)} extension profile(s)..."):
        return resolver.get_linked_templates()


def package_custom_script(cmd, script_file: str) -> str:
    return get_base64_custom_script_from_str(read_file_content(script_file, read_as_binary=True))
