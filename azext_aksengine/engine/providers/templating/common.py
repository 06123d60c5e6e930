# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from enum import Enum

from azure.cli.core.azclierror import (
    AzureResponseError,
    InvalidArgumentValueError,
    RequiredArgumentMissingError,
    ResourceNotFoundError,
    ValidationError,
)

# Network
BASE_LB_PRIORITY = 200
DEFAULT_INTERNAL_LB_STATIC_IP_OFFSET = 10
DEFAULT_POD_CIDR_FORMAT = "10.244.{}.0/24"

# Extensions
EXTENSIONS_DIR = "extensions"
SUPPORTED_ORCHESTRATORS_FILE = "supported-orchestrators.json"
TEMPLATE_LINK_FILE = "template-link.json"
EXTENSION_SINGLE = "single"
LINUX_EXTENSION_DIR_FORMAT = "/opt/azure/containers/extensions/{}"
WINDOWS_EXTENSION_DIR_FORMAT = "$env:SystemDrive:/AzureData/extensions/{}"

# Placeholders found in template-link.json
EXTENSION_TARGET_VM_TYPE = "EXTENSION_TARGET_VM_TYPE"
EXTENSION_PARAMETERS_REPLACE = "EXTENSION_PARAMETERS_REPLACE"
EXTENSION_URL_REPLACE = "EXTENSION_URL_REPLACE"
EXTENSION_TARGET_VM_NAME_PREFIX = "EXTENSION_TARGET_VM_NAME_PREFIX"
EXTENSION_LOOP_COUNT = "EXTENSION_LOOP_COUNT"
EXTENSION_LOOP_OFFSET = "EXTENSION_LOOP_OFFSET"

# Addons
ADDONS_DESTINATION_PATH = "/etc/kubernetes/addons"
ADDONS_SOURCE_PATH = "addons"

# Assets
KUBECONFIG_ASSET = "kubeconfig.json"

# Cloud name -> (fqdn suffix, target environment), matched by location prefix
AZURE_PUBLIC_CLOUD = "AzurePublicCloud"
CLOUD_LOCATION_MAP = {
    "china": ("cloudapp.chinacloudapi.cn", "AzureChinaCloud"),
    "germany": ("cloudapp.microsoftazure.de", "AzureGermanCloud"),
    "usgov": ("cloudapp.usgovcloudapi.net", "AzureUSGovernmentCloud"),
    "usdod": ("cloudapp.usgovcloudapi.net", "AzureUSGovernmentCloud"),
}
AZURE_PUBLIC_CLOUD_SUFFIX = "cloudapp.azure.com"


class OrchestratorType(Enum):
    kubernetes = "Kubernetes"
    swarm = "Swarm"
    swarm_mode = "SwarmMode"
    dcos = "DCOS"


class OSType(Enum):
    linux = "Linux"
    windows = "Windows"


class StorageProfile(Enum):
    storage_account = "StorageAccount"
    managed_disks = "ManagedDisks"


class AvailabilityProfile(Enum):
    availability_set = "AvailabilitySet"
    vmss = "VirtualMachineScaleSets"


class Distro(Enum):
    ubuntu = "ubuntu"
    rhel = "rhel"
    coreos = "coreos"


class InvalidInputError(RequiredArgumentMissingError):
    pass


class TemplateNotFoundError(ResourceNotFoundError):
    pass


class TemplateParseError(ValidationError):
    pass


class TemplateExecutionError(ValidationError):
    pass


class UnsupportedOrchestratorError(ValidationError):
    pass


class ResourceFetchError(AzureResponseError):
    pass


class ConfigurationError(InvalidArgumentValueError):
    pass
