# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from .file_operations import (
    deserialize_file_content,
    read_file_content,
)

__all__ = [
    "deserialize_file_content",
    "read_file_content",
]
