# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import json
from typing import List, Optional

from azext_aksengine.engine.providers.templating.common import OSType
from azext_aksengine.engine.providers.templating.extensions import get_extension_url
from azext_aksengine.engine.providers.templating.models import (
    AADProfile,
    AgentPoolProfile,
    CertificateProfile,
    ClusterProperties,
    Extension,
    ExtensionProfile,
    KubernetesAddon,
    KubernetesConfig,
    MasterProfile,
    OrchestratorProfile,
)

from ...generators import EXTENSIONS_ROOT_URL, generate_pool_name

MASTER_SUBNET = "10.240.255.0/24"
MASTER_STATIC_IP = "10.240.255.5"

TEMPLATE_LINK_CONTENT = """{
  "name": "[concat(EXTENSION_TARGET_VM_NAME_PREFIX, copyIndex(EXTENSION_LOOP_OFFSET), 'ext')]",
  "type": "Microsoft.Resources/deployments",
  "copy": {
    "count": "EXTENSION_LOOP_COUNT",
    "name": "EXTENSION_TARGET_VM_TYPEExtensionLoop"
  },
  "properties": {
    "templateLink": {
      "uri": "EXTENSION_URL_REPLACEextensions/template.json"
    },
    "parameters": "EXTENSION_PARAMETERS_REPLACE"
  }
}"""


def build_agent_pool(
    name: Optional[str] = None,
    count: int = 1,
    os_type: str = OSType.linux.value,
    subnet: str = "10.240.0.0/16",
    **kwargs,
) -> AgentPoolProfile:
    return AgentPoolProfile(name=name or generate_pool_name(), count=count, os_type=os_type, subnet=subnet, **kwargs)


def build_properties(
    agent_pools: Optional[List[AgentPoolProfile]] = None,
    master_count: int = 1,
    master_extensions: Optional[List[Extension]] = None,
    extension_profiles: Optional[List[ExtensionProfile]] = None,
    orchestrator_type: str = "Kubernetes",
    private_cluster: bool = False,
    static_ip: str = MASTER_STATIC_IP,
    dns_prefix: str = "mycluster",
    certificate_profile: Optional[CertificateProfile] = None,
    aad_profile: Optional[AADProfile] = None,
    addons: Optional[List[KubernetesAddon]] = None,
    **master_kwargs,
) -> ClusterProperties:
    return ClusterProperties(
        master_profile=MasterProfile(
            count=master_count,
            dns_prefix=dns_prefix,
            subnet=MASTER_SUBNET,
            first_consecutive_static_ip=static_ip,
            extensions=master_extensions,
            **master_kwargs,
        ),
        agent_pool_profiles=agent_pools,
        orchestrator_profile=OrchestratorProfile(
            orchestrator_type=orchestrator_type,
            kubernetes_config=KubernetesConfig(private_cluster_enabled=private_cluster, addons=addons or []),
        ),
        certificate_profile=certificate_profile,
        aad_profile=aad_profile,
        extension_profiles=extension_profiles,
    )


def build_extension_profile(
    name: str = "hello-world-k8s", version: str = "v1", script: str = "hello.sh", url_query: Optional[str] = None
) -> ExtensionProfile:
    return ExtensionProfile(
        name=name, version=version, root_url=EXTENSIONS_ROOT_URL, script=script, url_query=url_query
    )


def add_extension_responses(
    mocked_responses,
    extension_profile: ExtensionProfile,
    supported_orchestrators: Optional[List[str]] = None,
    template_link: Optional[str] = TEMPLATE_LINK_CONTENT,
    orchestrators_status: int = 200,
    template_status: int = 200,
):
    if supported_orchestrators is None:
        supported_orchestrators = ["Kubernetes"]
    files = [("supported-orchestrators.json", json.dumps(supported_orchestrators), orchestrators_status)]
    # Template link is only registered when the test expects it to be fetched.
    if template_link is not None:
        files.append(("template-link.json", template_link, template_status))
    for file_name, body, status in files:
        mocked_responses.add(
            method="GET",
            url=get_extension_url(
                extension_profile.root_url,
                extension_profile.name,
                extension_profile.version,
                file_name,
                extension_profile.url_query,
            ),
            body=body,
            status=status,
        )


