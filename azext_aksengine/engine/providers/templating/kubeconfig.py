# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import base64
import ipaddress
import json
from typing import Optional

from knack.log import get_logger

from .assets import AssetStore, PackagedAssetStore
from .common import (
    AZURE_PUBLIC_CLOUD,
    AZURE_PUBLIC_CLOUD_SUFFIX,
    CLOUD_LOCATION_MAP,
    DEFAULT_INTERNAL_LB_STATIC_IP_OFFSET,
    KUBECONFIG_ASSET,
    InvalidInputError,
)
from .models import ClusterProperties
from .user_strings import (
    INVALID_STATIC_IP_ERROR,
    MISSING_CERT_PROFILE_ERROR,
    MISSING_PROPERTIES_ERROR,
)

logger = get_logger(__name__)

CA_CERTIFICATE_TOKEN = "{{ WrapAsVerbatim(\"parameters('caCertificate')\") }}"
SERVER_TOKEN = (
    "{{ WrapAsVerbatim(\"reference(concat('Microsoft.Network/publicIPAddresses/', "
    "variables('masterPublicIPAddressName'))).dnsSettings.fqdn\") }}"
)
RESOURCE_GROUP_TOKEN = '{{ WrapAsVariable("resourceGroup") }}'
AUTH_INFO_TOKEN = "{{ authInfo }}"
DEFAULT_AAD_TENANT = "common"


def _b64(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("utf-8")


def _get_cloud_entry(location: str):
    location = (location or "").lower()
    for prefix in CLOUD_LOCATION_MAP:
        if location.startswith(prefix):
            return CLOUD_LOCATION_MAP[prefix]


def get_cloud_target_env(location: str) -> str:
    entry = _get_cloud_entry(location)
    return entry[1] if entry else AZURE_PUBLIC_CLOUD


def format_fqdn_by_location(fqdn_prefix: str, location: str) -> str:
    entry = _get_cloud_entry(location)
    suffix = entry[0] if entry else AZURE_PUBLIC_CLOUD_SUFFIX
    return f"{fqdn_prefix}.{location}.{suffix}"


def get_internal_lb_ip(first_static_ip: str) -> str:
    try:
        first_ip = ipaddress.IPv4Address(first_static_ip)
    except ValueError as e:
        raise InvalidInputError(INVALID_STATIC_IP_ERROR.format(first_static_ip)) from e
    octets = first_ip.packed
    # Offset is applied to the last octet only, wrapping like a byte.
    last_octet = (octets[3] + DEFAULT_INTERNAL_LB_STATIC_IP_OFFSET) % 256
    return str(ipaddress.IPv4Address(octets[:3] + bytes([last_octet])))


def get_server_address(properties: ClusterProperties, location: str) -> str:
    master_profile = properties.master_profile
    if properties.is_private_cluster:
        if master_profile.count > 1:
            return get_internal_lb_ip(master_profile.first_consecutive_static_ip)
        return master_profile.first_consecutive_static_ip
    return format_fqdn_by_location(master_profile.dns_prefix, location)


def get_auth_info(properties: ClusterProperties, location: str) -> str:
    aad_profile = properties.aad_profile
    if not aad_profile:
        cert_profile = properties.certificate_profile
        return json.dumps(
            {
                "client-certificate-data": _b64(cert_profile.kube_config_certificate),
                "client-key-data": _b64(cert_profile.kube_config_private_key),
            },
            separators=(",", ":"),
        )

    return json.dumps(
        {
            "auth-provider": {
                "name": "azure",
                "config": {
                    "environment": get_cloud_target_env(location),
                    "tenant-id": aad_profile.tenant_id or DEFAULT_AAD_TENANT,
                    "apiserver-id": aad_profile.server_app_id,
                    "client-id": aad_profile.client_app_id,
                },
            }
        },
        separators=(",", ":"),
    )


def generate_kubeconfig(
    properties: Optional[ClusterProperties], location: str, assets: Optional[AssetStore] = None
) -> str:
    """
    Returns the kubeconfig json document for the cluster.

    The server address is the internal load balancer ip for private clusters with more than one
    master, the master static ip for single master private clusters and the public fqdn otherwise.
    """
    if properties is None:
        raise InvalidInputError(MISSING_PROPERTIES_ERROR.format("kubeconfig"))
    if properties.certificate_profile is None:
        raise InvalidInputError(MISSING_CERT_PROFILE_ERROR.format("kubeconfig"))

    assets = assets or PackagedAssetStore()
    kubeconfig = assets.get_text(KUBECONFIG_ASSET)

    kubeconfig = kubeconfig.replace(CA_CERTIFICATE_TOKEN, _b64(properties.certificate_profile.ca_certificate))
    kubeconfig = kubeconfig.replace(SERVER_TOKEN, get_server_address(properties, location))
    kubeconfig = kubeconfig.replace(RESOURCE_GROUP_TOKEN, properties.master_profile.dns_prefix)
    kubeconfig = kubeconfig.replace(AUTH_INFO_TOKEN, get_auth_info(properties, location))
    logger.debug("Generated kubeconfig for %s", properties.master_profile.dns_prefix)
    return kubeconfig
