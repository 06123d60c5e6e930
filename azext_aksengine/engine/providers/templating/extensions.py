# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
extensions: resolution of remotely hosted extensions into linked template fragments.

Each extension profile is hosted under <rootURL>extensions/<name>/<version>/ and provides
supported-orchestrators.json plus a template-link.json fragment carrying EXTENSION_* tokens.
"""

import json
from enum import Enum
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

import requests
from azure.cli.core.azclierror import CLIInternalError
from knack.log import get_logger

from ....constants import USER_AGENT
from .common import (
    EXTENSION_LOOP_COUNT,
    EXTENSION_LOOP_OFFSET,
    EXTENSION_PARAMETERS_REPLACE,
    EXTENSION_SINGLE,
    EXTENSION_TARGET_VM_NAME_PREFIX,
    EXTENSION_TARGET_VM_TYPE,
    EXTENSION_URL_REPLACE,
    EXTENSIONS_DIR,
    LINUX_EXTENSION_DIR_FORMAT,
    SUPPORTED_ORCHESTRATORS_FILE,
    TEMPLATE_LINK_FILE,
    WINDOWS_EXTENSION_DIR_FORMAT,
    ResourceFetchError,
    UnsupportedOrchestratorError,
)
from .models import AgentPoolProfile, ClusterProperties, Extension, ExtensionProfile
from .user_strings import (
    EXTENSION_DECODE_ERROR,
    EXTENSION_FETCH_ERROR,
    EXTENSION_NOT_IN_CATALOG_ERROR,
    EXTENSION_ORCHESTRATORS_PARSE_ERROR,
    EXTENSION_STATUS_ERROR,
    EXTENSION_UNSUPPORTED_ORCHESTRATOR_ERROR,
)

logger = get_logger(__name__)


class ExtensionLoopMode(Enum):
    """Which instances of a pool an extension deployment loops over."""

    SINGLE_TARGET = "single"
    # Every instance of a scale set, the whole pool is redeployed.
    FIRST_DEPLOY = "first-deploy"
    # Instances past the pool offset, already extended instances are skipped on scale up.
    SCALE_UP = "scale-up"


class LoopParams(NamedTuple):
    count: str
    offset: str

    @property
    def is_static_count(self) -> bool:
        return self.count.isdigit()


def get_loop_mode(single_or_all: Optional[str], honors_offset: bool) -> ExtensionLoopMode:
    if single_or_all and single_or_all.lower() == EXTENSION_SINGLE:
        return ExtensionLoopMode.SINGLE_TARGET
    if honors_offset:
        return ExtensionLoopMode.SCALE_UP
    return ExtensionLoopMode.FIRST_DEPLOY


def get_loop_params(mode: ExtensionLoopMode, count_var: str, offset_var: str) -> LoopParams:
    if mode == ExtensionLoopMode.SCALE_UP:
        return LoopParams(
            count=f"[sub(variables('{count_var}'), variables('{offset_var}'))]",
            offset=f"variables('{offset_var}')",
        )
    if mode == ExtensionLoopMode.FIRST_DEPLOY:
        return LoopParams(count=f"[variables('{count_var}')]", offset="")
    # Which instance is targeted is left to the fetched template.
    offset = f"variables('{offset_var}')" if offset_var else ""
    return LoopParams(count="1", offset=offset)


class ExtensionCatalog:
    """Extension profiles indexed by case-insensitive name."""

    def __init__(self, extension_profiles: Iterable[ExtensionProfile]):
        self._profiles: Dict[str, ExtensionProfile] = {}
        for profile in extension_profiles:
            self._profiles.setdefault(profile.name.lower(), profile)

    def get(self, name: str) -> ExtensionProfile:
        profile = self._profiles.get(name.lower())
        if not profile:
            raise CLIInternalError(EXTENSION_NOT_IN_CATALOG_ERROR.format(name))
        return profile


def get_extension_url(
    root_url: str, extension_name: str, version: str, file_name: str, query: Optional[str] = None
) -> str:
    url = f"{root_url}{EXTENSIONS_DIR}/{extension_name}/{version}/{file_name}"
    if query:
        url += f"?{query}"
    return url


def make_extension_script_commands(extension: Extension, catalog: ExtensionCatalog) -> str:
    profile = catalog.get(extension.name)
    parameters_reference = f"parameters('{profile.name}Parameters')"
    script_url = get_extension_url(profile.root_url, profile.name, profile.version, profile.script, profile.url_query)
    script_file_path = f"{LINUX_EXTENSION_DIR_FORMAT.format(profile.name)}/{profile.script}"
    return (
        f"- sudo /usr/bin/curl --retry 5 --retry-delay 10 --retry-max-time 30 -o {script_file_path} "
        f'--create-dirs "{script_url}" \n'
        f"- sudo /bin/chmod 744 {script_file_path} \n"
        f"- sudo {script_file_path} ',{parameters_reference},' > /var/log/{profile.name}-output.log"
    )


def make_windows_extension_script_commands(extension: Extension, catalog: ExtensionCatalog) -> str:
    profile = catalog.get(extension.name)
    script_url = get_extension_url(profile.root_url, profile.name, profile.version, profile.script, profile.url_query)
    script_file_dir = WINDOWS_EXTENSION_DIR_FORMAT.format(profile.name)
    script_file_path = f"{script_file_dir}/{profile.script}"
    return (
        f'New-Item -ItemType Directory -Force -Path "{script_file_dir}" ; '
        f'Invoke-WebRequest -Uri "{script_url}" -OutFile "{script_file_path}" ; '
        f'powershell "{script_file_path} $preprovisionExtensionParams"\n'
    )


def make_master_extension_script_commands(properties: ClusterProperties, catalog: ExtensionCatalog) -> str:
    extension = properties.master_profile.preprovision_extension
    if not extension:
        return ""
    return make_extension_script_commands(extension, catalog)


def make_agent_extension_script_commands(profile: AgentPoolProfile, catalog: ExtensionCatalog) -> str:
    extension = profile.preprovision_extension
    if not extension:
        return ""
    if profile.is_windows:
        return make_windows_extension_script_commands(extension, catalog)
    return make_extension_script_commands(extension, catalog)


def get_opt_in(extension_name: str, profile_extensions: List[Extension]) -> Tuple[bool, Optional[str]]:
    for extension in profile_extensions:
        if extension.name == extension_name:
            return True, extension.single_or_all
    return False, None


def replace_extension_tokens(
    template_text: str,
    extension_profile: ExtensionProfile,
    target_vm_name_prefix: str,
    loop_params: LoopParams,
    is_master: bool,
) -> str:
    result = template_text.replace(EXTENSION_TARGET_VM_TYPE, "master" if is_master else "agent")
    result = result.replace(EXTENSION_PARAMETERS_REPLACE, f"[parameters('{extension_profile.name}Parameters')]")
    result = result.replace(EXTENSION_URL_REPLACE, extension_profile.root_url)
    result = result.replace(EXTENSION_TARGET_VM_NAME_PREFIX, target_vm_name_prefix)
    if loop_params.is_static_count:
        # Integer counts replace the quoted placeholder to land as a json number.
        result = result.replace(f'"{EXTENSION_LOOP_COUNT}"', loop_params.count)
    result = result.replace(EXTENSION_LOOP_COUNT, loop_params.count)
    return result.replace(EXTENSION_LOOP_OFFSET, loop_params.offset)


class ExtensionResolver:
    def __init__(
        self,
        properties: ClusterProperties,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.properties = properties
        self.orchestrator_type = properties.orchestrator_profile.orchestrator_type
        self.catalog = ExtensionCatalog(properties.extension_profiles)
        self.session = session
        self.timeout = timeout

    def get_linked_templates(self) -> str:
        """
        Builds the linked template deployments for every extension opted in by the master
        or an agent pool. Each fragment is prefixed with a separating comma.
        """
        result = []
        master_profile = self.properties.master_profile
        for extension_profile in self.properties.extension_profiles:
            opted_in, single_or_all = get_opt_in(extension_profile.name, master_profile.extensions)
            if opted_in:
                logger.debug("Master opted in for extension %s.", extension_profile.name)
                result.append(",")
                result.append(self.get_master_linked_template_text(extension_profile, single_or_all))

            for pool in self.properties.agent_pool_profiles:
                opted_in, single_or_all = get_opt_in(extension_profile.name, pool.extensions)
                if opted_in:
                    logger.debug("Agent pool %s opted in for extension %s.", pool.name, extension_profile.name)
                    result.append(",")
                    result.append(self.get_agent_pool_linked_template_text(pool, extension_profile, single_or_all))

        return "".join(result)

    def get_master_linked_template_text(
        self, extension_profile: ExtensionProfile, single_or_all: Optional[str] = None
    ) -> str:
        mode = get_loop_mode(single_or_all, honors_offset=True)
        loop_params = get_loop_params(mode, count_var="masterCount", offset_var="masterOffset")
        return self._get_pool_linked_template_text(
            target_vm_name_prefix="variables('masterVMNamePrefix')",
            loop_params=loop_params,
            extension_profile=extension_profile,
            is_master=True,
        )

    def get_agent_pool_linked_template_text(
        self, pool: AgentPoolProfile, extension_profile: ExtensionProfile, single_or_all: Optional[str] = None
    ) -> str:
        mode = get_loop_mode(single_or_all, honors_offset=pool.is_availability_sets)
        offset_var = f"{pool.name}Offset" if pool.is_availability_sets else ""
        loop_params = get_loop_params(mode, count_var=f"{pool.name}Count", offset_var=offset_var)
        return self._get_pool_linked_template_text(
            target_vm_name_prefix=f"variables('{pool.name}VMNamePrefix')",
            loop_params=loop_params,
            extension_profile=extension_profile,
            is_master=False,
        )

    def _get_pool_linked_template_text(
        self,
        target_vm_name_prefix: str,
        loop_params: LoopParams,
        extension_profile: ExtensionProfile,
        is_master: bool,
    ) -> str:
        template_text = self.get_linked_template_text_for_url(extension_profile)
        return replace_extension_tokens(
            template_text,
            extension_profile=extension_profile,
            target_vm_name_prefix=target_vm_name_prefix,
            loop_params=loop_params,
            is_master=is_master,
        )

    def get_linked_template_text_for_url(self, extension_profile: ExtensionProfile) -> str:
        self.orchestrator_supports_extension(extension_profile)
        content = self.get_extension_resource(extension_profile, TEMPLATE_LINK_FILE)
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ResourceFetchError(
                EXTENSION_DECODE_ERROR.format(
                    extension_profile.name,
                    extension_profile.version,
                    TEMPLATE_LINK_FILE,
                    get_extension_url(
                        extension_profile.root_url,
                        extension_profile.name,
                        extension_profile.version,
                        TEMPLATE_LINK_FILE,
                        extension_profile.url_query,
                    ),
                    e,
                )
            ) from e

    def orchestrator_supports_extension(self, extension_profile: ExtensionProfile) -> bool:
        content = self.get_extension_resource(extension_profile, SUPPORTED_ORCHESTRATORS_FILE)
        try:
            supported_orchestrators = json.loads(content)
        except ValueError:
            supported_orchestrators = None
        if not isinstance(supported_orchestrators, list):
            raise UnsupportedOrchestratorError(
                EXTENSION_ORCHESTRATORS_PARSE_ERROR.format(
                    SUPPORTED_ORCHESTRATORS_FILE, extension_profile.name, extension_profile.version
                )
            )

        if self.orchestrator_type not in supported_orchestrators:
            raise UnsupportedOrchestratorError(
                EXTENSION_UNSUPPORTED_ORCHESTRATOR_ERROR.format(
                    self.orchestrator_type, extension_profile.name, extension_profile.version
                )
            )
        return True

    def get_extension_resource(self, extension_profile: ExtensionProfile, file_name: str) -> bytes:
        request_url = get_extension_url(
            extension_profile.root_url,
            extension_profile.name,
            extension_profile.version,
            file_name,
            extension_profile.url_query,
        )
        logger.debug("Fetching extension resource %s", request_url)
        getter = self.session.get if self.session else requests.get
        try:
            response = getter(request_url, headers={"User-Agent": USER_AGENT}, timeout=self.timeout)
        except requests.RequestException as e:
            raise ResourceFetchError(
                EXTENSION_FETCH_ERROR.format(extension_profile.name, extension_profile.version, file_name, request_url)
                + f": {e}"
            ) from e

        if response.status_code != 200:
            raise ResourceFetchError(
                EXTENSION_STATUS_ERROR.format(
                    extension_profile.name,
                    extension_profile.version,
                    file_name,
                    request_url,
                    response.status_code,
                    response.reason,
                )
            )
        return response.content


def get_linked_templates_for_extensions(
    properties: ClusterProperties, session: Optional[requests.Session] = None, timeout: Optional[float] = None
) -> str:
    return ExtensionResolver(properties, session=session, timeout=timeout).get_linked_templates()
