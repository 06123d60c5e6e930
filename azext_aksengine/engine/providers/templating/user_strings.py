# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

# Assets
TEMPLATE_NOT_FOUND_ERROR = "Template file {0} does not exist."
TEMPLATE_PARSE_ERROR = "Error parsing file {0}: {1}"
TEMPLATE_EXECUTION_ERROR = "Error executing template for file {0}: {1}"
MISSING_BOOTSTRAP_ASSET_ERROR = "Bootstrap script asset {0} is missing from the package."

# Inputs
MISSING_PROPERTIES_ERROR = "Properties may not be empty when generating {0}."
MISSING_CERT_PROFILE_ERROR = "CertificateProfile may not be empty when generating {0}."
INVALID_STATIC_IP_ERROR = "MasterProfile.FirstConsecutiveStaticIP '{0}' is an invalid IP address."
INVALID_SIZE_NAME_ERROR = "Invalid VM size name: {0}"
UNSUPPORTED_DISTRO_ERROR = "Orchestrator type {0} is not supported on the RHEL {1}."

# Extensions
EXTENSION_NOT_IN_CATALOG_ERROR = "Extension {0} is referenced but was not found in the extension profiles."
EXTENSION_FETCH_ERROR = (
    "Unable to GET extension resource for extension: {0} with version {1} with filename {2} at URL: {3}"
)
EXTENSION_STATUS_ERROR = EXTENSION_FETCH_ERROR + " StatusCode: {4}: Status: {5}"
EXTENSION_DECODE_ERROR = EXTENSION_FETCH_ERROR + " Content is not valid UTF-8: {4}"
EXTENSION_ORCHESTRATORS_PARSE_ERROR = "Unable to parse {0} for extension {1} version {2}."
EXTENSION_UNSUPPORTED_ORCHESTRATOR_ERROR = (
    "Orchestrator: {0} not in list of supported orchestrators for extension: {1} version {2}."
)

# Addons
ADDON_CONTAINER_NOT_FOUND_ERROR = "Container {0} was not found in addon {1}."
