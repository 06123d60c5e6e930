# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
models: read-only cluster definition consumed by the template engine.

Values are taken as-is from an already validated api model; ``from_dict`` only maps
the camelCase api model keys onto attributes.
"""

from typing import Dict, List, NamedTuple, Optional, Tuple

from .common import (
    AvailabilityProfile,
    Distro,
    OrchestratorType,
    OSType,
    StorageProfile,
)


class Extension(NamedTuple):
    name: str
    single_or_all: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Extension":
        return cls(name=data["name"], single_or_all=data.get("singleOrAll"))


class ExtensionProfile(NamedTuple):
    name: str
    version: str
    root_url: str
    script: Optional[str] = None
    url_query: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ExtensionProfile":
        return cls(
            name=data["name"],
            version=data["version"],
            root_url=data["rootURL"],
            script=data.get("script"),
            url_query=data.get("urlQuery"),
        )


class CertificateProfile(NamedTuple):
    ca_certificate: str = ""
    kube_config_certificate: str = ""
    kube_config_private_key: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "CertificateProfile":
        return cls(
            ca_certificate=data.get("caCertificate", ""),
            kube_config_certificate=data.get("kubeConfigCertificate", ""),
            kube_config_private_key=data.get("kubeConfigPrivateKey", ""),
        )


class AADProfile(NamedTuple):
    client_app_id: str = ""
    server_app_id: str = ""
    tenant_id: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "AADProfile":
        return cls(
            client_app_id=data.get("clientAppID", ""),
            server_app_id=data.get("serverAppID", ""),
            tenant_id=data.get("tenantID", ""),
        )


class AddonContainer(NamedTuple):
    name: str
    image: str = ""
    cpu_requests: str = ""
    cpu_limits: str = ""
    memory_requests: str = ""
    memory_limits: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "AddonContainer":
        return cls(
            name=data["name"],
            image=data.get("image", ""),
            cpu_requests=data.get("cpuRequests", ""),
            cpu_limits=data.get("cpuLimits", ""),
            memory_requests=data.get("memoryRequests", ""),
            memory_limits=data.get("memoryLimits", ""),
        )


class KubernetesAddon(NamedTuple):
    name: str
    enabled: bool = False
    containers: Tuple[AddonContainer, ...] = ()
    config: Optional[Dict[str, str]] = None
    data: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "KubernetesAddon":
        return cls(
            name=data["name"],
            enabled=bool(data.get("enabled")),
            containers=tuple(AddonContainer.from_dict(c) for c in data.get("containers") or []),
            config=dict(data.get("config") or {}),
            data=data.get("data", ""),
        )

    def get_container_index_by_name(self, name: str) -> int:
        for index, container in enumerate(self.containers):
            if container.name == name:
                return index
        return -1


class KubernetesConfig(NamedTuple):
    private_cluster_enabled: bool = False
    addons: Tuple[KubernetesAddon, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "KubernetesConfig":
        private_cluster = data.get("privateCluster") or {}
        return cls(
            private_cluster_enabled=bool(private_cluster.get("enabled")),
            addons=tuple(KubernetesAddon.from_dict(a) for a in data.get("addons") or []),
        )

    def get_addon_by_name(self, name: str) -> Optional[KubernetesAddon]:
        for addon in self.addons:
            if addon.name == name:
                return addon


class OrchestratorProfile(NamedTuple):
    orchestrator_type: str = OrchestratorType.kubernetes.value
    orchestrator_version: Optional[str] = None
    kubernetes_config: Optional[KubernetesConfig] = None

    @classmethod
    def from_dict(cls, data: dict) -> "OrchestratorProfile":
        kubernetes_config = data.get("kubernetesConfig")
        return cls(
            orchestrator_type=data.get("orchestratorType", OrchestratorType.kubernetes.value),
            orchestrator_version=data.get("orchestratorVersion"),
            kubernetes_config=KubernetesConfig.from_dict(kubernetes_config) if kubernetes_config else None,
        )

    @property
    def is_kubernetes(self) -> bool:
        return self.orchestrator_type == OrchestratorType.kubernetes.value


class MasterProfile:
    def __init__(
        self,
        count: int = 1,
        dns_prefix: str = "",
        subnet: str = "",
        first_consecutive_static_ip: str = "",
        distro: Optional[str] = None,
        extensions: Optional[List[Extension]] = None,
        preprovision_extension: Optional[Extension] = None,
    ):
        self.count = count
        self.dns_prefix = dns_prefix
        self.subnet = subnet
        self.first_consecutive_static_ip = first_consecutive_static_ip
        self.distro = distro
        self.extensions = extensions or []
        self.preprovision_extension = preprovision_extension

    @classmethod
    def from_dict(cls, data: dict) -> "MasterProfile":
        return cls(
            count=int(data.get("count", 1)),
            dns_prefix=data.get("dnsPrefix", ""),
            subnet=data.get("subnet", ""),
            first_consecutive_static_ip=data.get("firstConsecutiveStaticIP", ""),
            distro=data.get("distro"),
            extensions=[Extension.from_dict(e) for e in data.get("extensions") or []],
            preprovision_extension=_get_extension(data.get("preProvisionExtension")),
        )

    @property
    def is_rhel(self) -> bool:
        return self.distro == Distro.rhel.value


class AgentPoolProfile:
    def __init__(
        self,
        name: str,
        count: int = 1,
        os_type: str = OSType.linux.value,
        subnet: str = "",
        storage_profile: str = StorageProfile.managed_disks.value,
        disk_sizes_gb: Optional[List[int]] = None,
        availability_profile: str = AvailabilityProfile.availability_set.value,
        distro: Optional[str] = None,
        extensions: Optional[List[Extension]] = None,
        preprovision_extension: Optional[Extension] = None,
        ports: Optional[List[int]] = None,
    ):
        self.name = name
        self.count = count
        self.os_type = os_type
        self.subnet = subnet
        self.storage_profile = storage_profile
        self.disk_sizes_gb = disk_sizes_gb or []
        self.availability_profile = availability_profile
        self.distro = distro
        self.extensions = extensions or []
        self.preprovision_extension = preprovision_extension
        self.ports = ports or []

    @classmethod
    def from_dict(cls, data: dict) -> "AgentPoolProfile":
        return cls(
            name=data["name"],
            count=int(data.get("count", 1)),
            os_type=data.get("osType", OSType.linux.value),
            subnet=data.get("subnet", ""),
            storage_profile=data.get("storageProfile", StorageProfile.managed_disks.value),
            disk_sizes_gb=[int(size) for size in data.get("diskSizesGB") or []],
            availability_profile=data.get("availabilityProfile", AvailabilityProfile.availability_set.value),
            distro=data.get("distro"),
            extensions=[Extension.from_dict(e) for e in data.get("extensions") or []],
            preprovision_extension=_get_extension(data.get("preProvisionExtension")),
            ports=[int(port) for port in data.get("ports") or []],
        )

    @property
    def is_windows(self) -> bool:
        return self.os_type == OSType.windows.value

    @property
    def is_availability_sets(self) -> bool:
        return self.availability_profile == AvailabilityProfile.availability_set.value

    @property
    def is_rhel(self) -> bool:
        return self.distro == Distro.rhel.value

    @property
    def has_disks(self) -> bool:
        return len(self.disk_sizes_gb) > 0


class ClusterProperties:
    def __init__(
        self,
        master_profile: MasterProfile,
        agent_pool_profiles: Optional[List[AgentPoolProfile]] = None,
        orchestrator_profile: Optional[OrchestratorProfile] = None,
        certificate_profile: Optional[CertificateProfile] = None,
        aad_profile: Optional[AADProfile] = None,
        extension_profiles: Optional[List[ExtensionProfile]] = None,
    ):
        self.master_profile = master_profile
        self.agent_pool_profiles = agent_pool_profiles or []
        self.orchestrator_profile = orchestrator_profile or OrchestratorProfile()
        self.certificate_profile = certificate_profile
        self.aad_profile = aad_profile
        self.extension_profiles = extension_profiles or []

    @classmethod
    def from_dict(cls, data: dict) -> "ClusterProperties":
        # Accept either the full api model or its "properties" section.
        data = data.get("properties", data)
        orchestrator_profile = data.get("orchestratorProfile")
        certificate_profile = data.get("certificateProfile")
        aad_profile = data.get("aadProfile")
        return cls(
            master_profile=MasterProfile.from_dict(data.get("masterProfile") or {}),
            agent_pool_profiles=[AgentPoolProfile.from_dict(p) for p in data.get("agentPoolProfiles") or []],
            orchestrator_profile=OrchestratorProfile.from_dict(orchestrator_profile) if orchestrator_profile else None,
            certificate_profile=CertificateProfile.from_dict(certificate_profile) if certificate_profile else None,
            aad_profile=AADProfile.from_dict(aad_profile) if aad_profile else None,
            extension_profiles=[ExtensionProfile.from_dict(e) for e in data.get("extensionProfiles") or []],
        )

    @property
    def is_private_cluster(self) -> bool:
        kubernetes_config = self.orchestrator_profile.kubernetes_config
        return bool(kubernetes_config and kubernetes_config.private_cluster_enabled)

    def get_addons(self) -> List[KubernetesAddon]:
        kubernetes_config = self.orchestrator_profile.kubernetes_config
        if not kubernetes_config:
            return []
        return list(kubernetes_config.addons)


def _get_extension(data: Optional[dict]) -> Optional[Extension]:
    if not data:
        return None
    return Extension.from_dict(data)
