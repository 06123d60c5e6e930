# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import base64
import gzip
from typing import Union

from azure.cli.core.azclierror import CLIInternalError

from .assets import AssetStore
from .common import TemplateNotFoundError
from .user_strings import MISSING_BOOTSTRAP_ASSET_ERROR


def get_base64_custom_script_from_str(script: Union[str, bytes]) -> str:
    if isinstance(script, str):
        script = script.encode("utf-8")
    script = script.replace(b"\r\n", b"\n")
    # Fixed mtime keeps the gzip header stable across runs.
    compressed = gzip.compress(script, mtime=0)
    return base64.b64encode(compressed).decode("utf-8")


def get_base64_custom_script(name: str, assets: AssetStore) -> str:
    try:
        script = assets.get(name)
    except TemplateNotFoundError as e:
        raise CLIInternalError(MISSING_BOOTSTRAP_ASSET_ERROR.format(name)) from e
    return get_base64_custom_script_from_str(script)


def build_config_string(config_string: str, destination_file: str, destination_path: str) -> str:
    contents = [
        f"- path: {destination_path}/{destination_file}",
        '  permissions: "0644"',
        "  encoding: gzip",
        '  owner: "root"',
        "  content: !!binary |",
        f"    {config_string}\n\n",
    ]
    return "\n".join(contents)


def get_addon_string(content: str, destination_path: str, destination_file: str) -> str:
    return build_config_string(get_base64_custom_script_from_str(content), destination_file, destination_path)
