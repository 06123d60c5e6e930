# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import json

import pytest
import requests
from azure.cli.core.azclierror import CLIInternalError

from azext_aksengine.constants import USER_AGENT
from azext_aksengine.engine.providers.templating.common import (
    AvailabilityProfile,
    OSType,
    ResourceFetchError,
    UnsupportedOrchestratorError,
)
from azext_aksengine.engine.providers.templating.extensions import (
    ExtensionCatalog,
    ExtensionLoopMode,
    ExtensionResolver,
    LoopParams,
    get_extension_url,
    get_linked_templates_for_extensions,
    get_loop_mode,
    get_loop_params,
    get_opt_in,
    make_agent_extension_script_commands,
    make_master_extension_script_commands,
    replace_extension_tokens,
)
from azext_aksengine.engine.providers.templating.models import Extension

from ...generators import EXTENSIONS_ROOT_URL
from .conftest import (
    TEMPLATE_LINK_CONTENT,
    add_extension_responses,
    build_agent_pool,
    build_extension_profile,
    build_properties,
)


def _parse_linked_templates(result: str) -> list:
    assert result.startswith(",")
    return json.loads(f"[{result[1:]}]")


@pytest.mark.parametrize(
    "query,expected",
    [
        (None, f"{EXTENSIONS_ROOT_URL}extensions/hello/v1/template-link.json"),
        ("sv=2019&sig=abc", f"{EXTENSIONS_ROOT_URL}extensions/hello/v1/template-link.json?sv=2019&sig=abc"),
    ],
)
def test_get_extension_url(query, expected):
    assert get_extension_url(EXTENSIONS_ROOT_URL, "hello", "v1", "template-link.json", query) == expected


@pytest.mark.parametrize(
    "single_or_all,honors_offset,expected_mode,expected_params",
    [
        pytest.param(
            None,
            True,
            ExtensionLoopMode.SCALE_UP,
            LoopParams("[sub(variables('cnt'), variables('off'))]", "variables('off')"),
            id="scale up",
        ),
        pytest.param(
            "all", False, ExtensionLoopMode.FIRST_DEPLOY, LoopParams("[variables('cnt')]", ""), id="first deploy"
        ),
        pytest.param(
            "Single", True, ExtensionLoopMode.SINGLE_TARGET, LoopParams("1", "variables('off')"), id="single"
        ),
    ],
)
def test_loop_params(single_or_all, honors_offset, expected_mode, expected_params):
    mode = get_loop_mode(single_or_all, honors_offset)
    assert mode == expected_mode
    assert get_loop_params(mode, count_var="cnt", offset_var="off") == expected_params


def test_loop_params_single_without_offset():
    params = get_loop_params(ExtensionLoopMode.SINGLE_TARGET, count_var="cnt", offset_var="")
    assert params == LoopParams("1", "")
    assert params.is_static_count


def test_replace_extension_tokens_static_count():
    extension_profile = build_extension_profile()
    result = replace_extension_tokens(
        TEMPLATE_LINK_CONTENT,
        extension_profile=extension_profile,
        target_vm_name_prefix="variables('pool1VMNamePrefix')",
        loop_params=LoopParams("1", ""),
        is_master=False,
    )
    assert "EXTENSION_" not in result

    parsed = json.loads(result)
    assert parsed["copy"] == {"count": 1, "name": "agentExtensionLoop"}
    assert parsed["name"] == "[concat(variables('pool1VMNamePrefix'), copyIndex(), 'ext')]"
    assert parsed["properties"]["parameters"] == "[parameters('hello-world-k8sParameters')]"
    assert parsed["properties"]["templateLink"]["uri"] == f"{EXTENSIONS_ROOT_URL}extensions/template.json"


def test_get_opt_in():
    extensions = [Extension("hello-world-k8s", "single"), Extension("other")]
    assert get_opt_in("hello-world-k8s", extensions) == (True, "single")
    assert get_opt_in("other", extensions) == (True, None)
    assert get_opt_in("Hello-World-K8s", extensions) == (False, None)
    assert get_opt_in("hello-world-k8s", []) == (False, None)


def test_resolver_linked_templates(mocked_responses):
    extension_profile = build_extension_profile(url_query="sig=abc")
    add_extension_responses(mocked_responses, extension_profile)
    opt_in = [Extension(extension_profile.name)]
    properties = build_properties(
        master_extensions=opt_in,
        extension_profiles=[extension_profile],
        agent_pools=[
            build_agent_pool(name="aspool", extensions=opt_in),
            build_agent_pool(name="skipped"),
            build_agent_pool(
                name="vmsspool", extensions=opt_in, availability_profile=AvailabilityProfile.vmss.value
            ),
            build_agent_pool(name="singlepool", extensions=[Extension(extension_profile.name, "single")]),
        ],
    )

    result = get_linked_templates_for_extensions(properties)
    assert "EXTENSION_" not in result
    deployments = _parse_linked_templates(result)
    assert len(deployments) == 4

    master, as_pool, vmss_pool, single_pool = deployments
    assert master["copy"] == {
        "count": "[sub(variables('masterCount'), variables('masterOffset'))]",
        "name": "masterExtensionLoop",
    }
    assert master["name"] == "[concat(variables('masterVMNamePrefix'), copyIndex(variables('masterOffset')), 'ext')]"

    assert as_pool["copy"] == {
        "count": "[sub(variables('aspoolCount'), variables('aspoolOffset'))]",
        "name": "agentExtensionLoop",
    }
    assert vmss_pool["copy"]["count"] == "[variables('vmsspoolCount')]"
    assert vmss_pool["name"] == "[concat(variables('vmsspoolVMNamePrefix'), copyIndex(), 'ext')]"
    assert single_pool["copy"]["count"] == 1
    assert single_pool["name"] == (
        "[concat(variables('singlepoolVMNamePrefix'), copyIndex(variables('singlepoolOffset')), 'ext')]"
    )

    # Supported orchestrators and template link per opted in profile.
    assert len(mocked_responses.calls) == 8
    assert all(call.request.url.endswith("?sig=abc") for call in mocked_responses.calls)
    assert mocked_responses.calls[0].request.headers["User-Agent"] == USER_AGENT


def test_resolver_no_opt_in(mocked_responses):
    properties = build_properties(
        extension_profiles=[build_extension_profile()], agent_pools=[build_agent_pool()]
    )
    assert ExtensionResolver(properties).get_linked_templates() == ""
    assert len(mocked_responses.calls) == 0


@pytest.mark.parametrize(
    "supported_orchestrators,orchestrator_type",
    [
        (["DCOS", "Swarm"], "Kubernetes"),
        (["Kubernetes"], "DCOS"),
        ({"Kubernetes": True}, "Kubernetes"),
    ],
)
def test_resolver_unsupported_orchestrator(mocked_responses, supported_orchestrators, orchestrator_type):
    extension_profile = build_extension_profile()
    add_extension_responses(
        mocked_responses, extension_profile, supported_orchestrators=supported_orchestrators, template_link=None
    )
    properties = build_properties(
        orchestrator_type=orchestrator_type,
        master_extensions=[Extension(extension_profile.name)],
        extension_profiles=[extension_profile],
    )

    with pytest.raises(UnsupportedOrchestratorError):
        ExtensionResolver(properties).get_linked_templates()


def test_resolver_orchestrators_not_json(mocked_responses):
    extension_profile = build_extension_profile()
    mocked_responses.add(
        method="GET",
        url=get_extension_url(EXTENSIONS_ROOT_URL, extension_profile.name, "v1", "supported-orchestrators.json"),
        body="<html>not json</html>",
    )
    properties = build_properties(extension_profiles=[extension_profile])

    with pytest.raises(UnsupportedOrchestratorError) as e:
        ExtensionResolver(properties).orchestrator_supports_extension(extension_profile)
    assert "Unable to parse supported-orchestrators.json" in str(e.value)


@pytest.mark.parametrize("orchestrators_status,template_status", [(404, 200), (200, 500)])
def test_resolver_fetch_status_error(mocked_responses, orchestrators_status, template_status):
    extension_profile = build_extension_profile()
    add_extension_responses(
        mocked_responses,
        extension_profile,
        orchestrators_status=orchestrators_status,
        template_link=TEMPLATE_LINK_CONTENT if orchestrators_status == 200 else None,
        template_status=template_status,
    )
    properties = build_properties(
        master_extensions=[Extension(extension_profile.name)], extension_profiles=[extension_profile]
    )

    with pytest.raises(ResourceFetchError) as e:
        ExtensionResolver(properties).get_linked_templates()
    assert f"StatusCode: {orchestrators_status if orchestrators_status != 200 else template_status}" in str(e.value)


def test_resolver_template_link_not_utf8(mocked_responses):
    extension_profile = build_extension_profile()
    add_extension_responses(mocked_responses, extension_profile, template_link=b"\xff\xfe{}")
    properties = build_properties(
        master_extensions=[Extension(extension_profile.name)], extension_profiles=[extension_profile]
    )

    with pytest.raises(ResourceFetchError) as e:
        ExtensionResolver(properties).get_linked_templates()
    assert "extension: hello-world-k8s with version v1 with filename template-link.json" in str(e.value)
    assert "not valid UTF-8" in str(e.value)


def test_resolver_later_extension_failure(mocked_responses):
    first_profile = build_extension_profile(name="first-ext")
    failing_profile = build_extension_profile(name="failing-ext")
    add_extension_responses(mocked_responses, first_profile)
    add_extension_responses(mocked_responses, failing_profile, orchestrators_status=404, template_link=None)
    properties = build_properties(
        master_extensions=[Extension(first_profile.name), Extension(failing_profile.name)],
        extension_profiles=[first_profile, failing_profile],
    )

    result = None
    with pytest.raises(ResourceFetchError) as e:
        result = ExtensionResolver(properties).get_linked_templates()
    assert result is None
    assert "failing-ext" in str(e.value)
    assert len(mocked_responses.calls) == 3


def test_resolver_linked_templates_order(mocked_responses):
    extension_profiles = [build_extension_profile(name="alpha-ext"), build_extension_profile(name="beta-ext")]
    for extension_profile in extension_profiles:
        add_extension_responses(mocked_responses, extension_profile)
    # Opt-in order on the profiles does not drive output order.
    opt_in = [Extension("beta-ext"), Extension("alpha-ext")]
    properties = build_properties(
        master_extensions=opt_in,
        extension_profiles=extension_profiles,
        agent_pools=[build_agent_pool(name="pool1", extensions=opt_in)],
    )

    deployments = _parse_linked_templates(ExtensionResolver(properties).get_linked_templates())
    assert [(d["copy"]["name"], d["properties"]["parameters"]) for d in deployments] == [
        ("masterExtensionLoop", "[parameters('alpha-extParameters')]"),
        ("agentExtensionLoop", "[parameters('alpha-extParameters')]"),
        ("masterExtensionLoop", "[parameters('beta-extParameters')]"),
        ("agentExtensionLoop", "[parameters('beta-extParameters')]"),
    ]


def test_resolver_fetch_connection_error(mocked_responses):
    extension_profile = build_extension_profile()
    mocked_responses.add(
        method="GET",
        url=get_extension_url(EXTENSIONS_ROOT_URL, extension_profile.name, "v1", "supported-orchestrators.json"),
        body=requests.ConnectionError("connection refused"),
    )
    properties = build_properties(
        master_extensions=[Extension(extension_profile.name)], extension_profiles=[extension_profile]
    )

    with pytest.raises(ResourceFetchError) as e:
        ExtensionResolver(properties).get_linked_templates()
    assert "connection refused" in str(e.value)


def test_resolver_session_timeout(mocker):
    extension_profile = build_extension_profile()
    session = mocker.Mock()
    session.get.return_value = mocker.Mock(status_code=200, content=b'["Kubernetes"]')
    properties = build_properties(extension_profiles=[extension_profile])

    assert ExtensionResolver(properties, session=session, timeout=30).orchestrator_supports_extension(
        extension_profile
    )
    session.get.assert_called_once_with(
        get_extension_url(EXTENSIONS_ROOT_URL, extension_profile.name, "v1", "supported-orchestrators.json"),
        headers={"User-Agent": USER_AGENT},
        timeout=30,
    )


def test_master_extension_script_commands():
    extension_profile = build_extension_profile(url_query="sig=abc")
    catalog = ExtensionCatalog([extension_profile])

    assert make_master_extension_script_commands(build_properties(), catalog) == ""

    properties = build_properties(preprovision_extension=Extension(extension_profile.name.upper()))
    commands = make_master_extension_script_commands(properties, catalog).split("\n")
    script_path = "/opt/azure/containers/extensions/hello-world-k8s/hello.sh"
    assert len(commands) == 3
    assert commands[0].startswith("- sudo /usr/bin/curl --retry 5 --retry-delay 10 --retry-max-time 30")
    assert f'-o {script_path} --create-dirs "{EXTENSIONS_ROOT_URL}extensions/hello-world-k8s/v1/hello.sh?sig=abc"' in (
        commands[0]
    )
    assert commands[1] == f"- sudo /bin/chmod 744 {script_path} "
    assert commands[2] == (
        f"- sudo {script_path} ',parameters('hello-world-k8sParameters'),' > /var/log/hello-world-k8s-output.log"
    )


def test_agent_extension_script_commands():
    extension_profile = build_extension_profile(script="hello.ps1")
    catalog = ExtensionCatalog([extension_profile])

    windows_pool = build_agent_pool(
        os_type=OSType.windows.value, preprovision_extension=Extension(extension_profile.name)
    )
    commands = make_agent_extension_script_commands(windows_pool, catalog)
    script_dir = "$env:SystemDrive:/AzureData/extensions/hello-world-k8s"
    assert commands == (
        f'New-Item -ItemType Directory -Force -Path "{script_dir}" ; '
        f'Invoke-WebRequest -Uri "{EXTENSIONS_ROOT_URL}extensions/hello-world-k8s/v1/hello.ps1" '
        f'-OutFile "{script_dir}/hello.ps1" ; '
        f'powershell "{script_dir}/hello.ps1 $preprovisionExtensionParams"\n'
    )

    linux_pool = build_agent_pool(preprovision_extension=Extension(extension_profile.name))
    assert make_agent_extension_script_commands(linux_pool, catalog).startswith("- sudo /usr/bin/curl")
    assert make_agent_extension_script_commands(build_agent_pool(), catalog) == ""


def test_extension_catalog_missing():
    catalog = ExtensionCatalog([build_extension_profile()])
    pool = build_agent_pool(preprovision_extension=Extension("unknown"))
    with pytest.raises(CLIInternalError):
        make_agent_extension_script_commands(pool, catalog)
