# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
assembler: expands named template assets against a cluster definition.

Assets are Jinja2 templates. The function table exposed to them is bound to the cluster
properties of the assembler, the profile being rendered is available as ``profile``.
"""

from typing import Any, Callable, Dict, Optional

import requests
from azure.cli.core.azclierror import AzCLIError
from jinja2 import Environment, StrictUndefined, TemplateSyntaxError
from knack.log import get_logger

from .addons import build_addon_settings, get_addon_func_map
from .assets import AssetStore, PackagedAssetStore
from .common import (
    ADDONS_DESTINATION_PATH,
    ADDONS_SOURCE_PATH,
    ConfigurationError,
    TemplateExecutionError,
    TemplateParseError,
)
from .custom_script import get_addon_string, get_base64_custom_script, get_base64_custom_script_from_str
from .extensions import (
    ExtensionCatalog,
    ExtensionResolver,
    make_agent_extension_script_commands,
    make_master_extension_script_commands,
)
from .models import ClusterProperties
from .network import (
    get_data_disks,
    get_kubernetes_pod_start_index,
    get_kubernetes_subnets,
    get_lb_rules,
    get_probes,
    get_security_rules,
    get_vnet_address_prefixes,
    get_vnet_subnet_dependencies,
    get_vnet_subnets,
)
from .user_strings import (
    INVALID_SIZE_NAME_ERROR,
    TEMPLATE_EXECUTION_ERROR,
    TEMPLATE_PARSE_ERROR,
    UNSUPPORTED_DISTRO_ERROR,
)

logger = get_logger(__name__)


def escape_single_line(text: str) -> str:
    text = text.replace("\\", "\\\\")
    text = text.replace("\r\n", "\\n")
    text = text.replace("\n", "\\n")
    return text.replace('"', '\\"')


def get_storage_account_type(size_name: str) -> str:
    """Returns the managed disk storage tier supported by a vm size, e.g. Standard_DS2_v2."""
    parts = size_name.split("_")
    if len(parts) < 2:
        raise ConfigurationError(INVALID_SIZE_NAME_ERROR.format(size_name))
    if "s" in parts[1].lower():
        return "Premium_LRS"
    return "Standard_LRS"


def validate_distro(properties: ClusterProperties) -> bool:
    orchestrator_type = properties.orchestrator_profile.orchestrator_type
    if properties.master_profile and properties.master_profile.is_rhel:
        raise ConfigurationError(UNSUPPORTED_DISTRO_ERROR.format(orchestrator_type, "master"))
    for profile in properties.agent_pool_profiles:
        if profile.is_rhel:
            raise ConfigurationError(UNSUPPORTED_DISTRO_ERROR.format(orchestrator_type, f"agent pool {profile.name}"))
    return True


def wrap_as_variable(name: str) -> str:
    return f"',variables('{name}'),'"


def wrap_as_parameter(name: str) -> str:
    return f"',parameters('{name}'),'"


def wrap_as_verbatim(expression: str) -> str:
    return f"',{expression},'"


def _get_environment(func_map: Dict[str, Callable]) -> Environment:
    env = Environment(undefined=StrictUndefined, keep_trailing_newline=True, autoescape=False)
    env.globals.update(func_map)
    return env


class TemplateAssembler:
    def __init__(
        self,
        properties: ClusterProperties,
        assets: Optional[AssetStore] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.properties = properties
        self.assets = assets or PackagedAssetStore()
        self.catalog = ExtensionCatalog(properties.extension_profiles)
        self.resolver = ExtensionResolver(properties, session=session, timeout=timeout)

    def get_template_func_map(self) -> Dict[str, Callable]:
        properties = self.properties
        return {
            "IsKubernetes": lambda: properties.orchestrator_profile.is_kubernetes,
            "IsPrivateCluster": lambda: properties.is_private_cluster,
            "GetMasterExtensionScriptCommands": lambda: make_master_extension_script_commands(
                properties, self.catalog
            ),
            "GetAgentExtensionScriptCommands": lambda profile: make_agent_extension_script_commands(
                profile, self.catalog
            ),
            "GetStorageAccountType": get_storage_account_type,
            "GetVNETAddressPrefixes": lambda: get_vnet_address_prefixes(properties),
            "GetVNETSubnets": lambda add_nsg=False: get_vnet_subnets(properties, add_nsg),
            "GetVNETSubnetDependencies": lambda: get_vnet_subnet_dependencies(properties),
            "GetLBRules": get_lb_rules,
            "GetProbes": get_probes,
            "GetSecurityRules": get_security_rules,
            "GetDataDisks": get_data_disks,
            "GetKubernetesSubnets": lambda: get_kubernetes_subnets(properties),
            "GetKubernetesPodStartIndex": lambda: get_kubernetes_pod_start_index(properties),
            "GetLinkedTemplatesForExtensions": self.resolver.get_linked_templates,
            "GetKubernetesAddons": self.get_container_addons_string,
            "GetBase64CustomScript": lambda name: get_base64_custom_script(name, self.assets),
            "Base64": get_base64_custom_script_from_str,
            "WrapAsVariable": wrap_as_variable,
            "WrapAsParameter": wrap_as_parameter,
            "WrapAsVerbatim": wrap_as_verbatim,
        }

    def render(self, name: str, profile: Any = None) -> str:
        return self._render(name, profile, self.get_template_func_map())

    def render_single_line(self, name: str, profile: Any = None) -> str:
        """Renders the asset escaped for embedding as a json string literal."""
        return escape_single_line(self.render(name, profile))

    def render_base64(self, name: str, profile: Any = None) -> str:
        return get_base64_custom_script_from_str(self.render(name, profile))

    def get_container_addons_string(self, source_path: str = ADDONS_SOURCE_PATH) -> str:
        result = []
        settings = build_addon_settings(self.properties)
        kubernetes_config = self.properties.orchestrator_profile.kubernetes_config
        for addon_name in sorted(settings):
            setting = settings[addon_name]
            if not setting.is_enabled:
                logger.debug("Addon %s is disabled, skipping.", addon_name)
                continue

            if setting.raw_script:
                content = setting.raw_script
            else:
                addon = kubernetes_config.get_addon_by_name(addon_name)
                content = self._render(
                    f"{source_path}/{setting.source_file}", addon, get_addon_func_map(addon)
                )
            result.append(get_addon_string(content, ADDONS_DESTINATION_PATH, setting.destination_file))
        return "".join(result)

    def _render(self, name: str, profile: Any, func_map: Dict[str, Callable]) -> str:
        text = self.assets.get_text(name)
        env = _get_environment(func_map)
        try:
            template = env.from_string(text)
        except TemplateSyntaxError as e:
            raise TemplateParseError(TEMPLATE_PARSE_ERROR.format(name, e)) from e

        try:
            return template.render(profile=profile)
        except AzCLIError:
            raise
        except Exception as e:
            raise TemplateExecutionError(TEMPLATE_EXECUTION_ERROR.format(name, e)) from e
