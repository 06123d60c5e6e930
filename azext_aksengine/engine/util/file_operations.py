# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

import json
import os
from pathlib import Path
from typing import Any, Callable, Optional, Union

import yaml
from azure.cli.core.azclierror import FileOperationError
from knack.log import get_logger

logger = get_logger(__name__)

JSON_EXTENSIONS = frozenset(["json"])
YAML_EXTENSIONS = frozenset(["yaml", "yml"])


def read_file_content(file_path: str, read_as_binary: bool = False) -> Union[bytes, str]:
    logger.debug("Processing %s", file_path)
    path = Path(os.path.abspath(os.path.expanduser(file_path)))

    if not path.exists():
        raise FileOperationError(f"{file_path} does not exist.")

    if not path.is_file():
        raise FileOperationError(f"{file_path} is not a file.")

    if read_as_binary:
        return path.read_bytes()

    # Try with 'utf-8-sig' first, so that BOM in WinOS won't cause trouble.
    for encoding in ["utf-8-sig", "utf-8"]:
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            pass

    raise FileOperationError(f"Failed to decode file {file_path}.")


def deserialize_file_content(file_path: str) -> Any:
    """
    Loads a json or yaml document. Files without a known extension are tried as json first.
    """
    extension = file_path.split(".")[-1].lower()
    content = read_file_content(file_path)
    if extension in JSON_EXTENSIONS:
        return _try_loading_as(json.loads, content, json.JSONDecodeError)
    if extension in YAML_EXTENSIONS:
        return _try_loading_as(yaml.safe_load, content, yaml.YAMLError)

    result = _try_loading_as(json.loads, content, json.JSONDecodeError, raise_error=False)
    if result is None:
        result = _try_loading_as(yaml.safe_load, content, yaml.YAMLError, raise_error=False)
    if result is None:
        raise FileOperationError(f"File contents for {file_path} cannot be read.")
    return result


def _try_loading_as(
    loader: Callable, content: str, error_type: type, raise_error: bool = True
) -> Optional[Any]:
    try:
        return loader(content)
    except error_type as e:
        if raise_error:
            raise FileOperationError(str(e))
