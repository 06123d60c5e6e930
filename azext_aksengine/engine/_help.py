# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------
"""
Help content for AKS Engine template commands.
"""

from knack.help_files import helps


def load_aksengine_help():
    helps[
        "aks-engine"
    ] = """
        type: group
        short-summary: Generate AKS Engine cluster deployment content.
    """

    helps[
        "aks-engine template"
    ] = """
        type: group
        short-summary: Render ARM template fragments, kubeconfig documents and bootstrap payloads.
        long-summary: |
            Commands read a cluster api model (json or yaml) that is expected to be validated already.

            Extension resolution fetches content from each extension root url. A request timeout
            in seconds can be set with `az config set aksengine.extension_timeout=30`.
    """

    helps[
        "aks-engine template render"
    ] = """
        type: command
        short-summary: Render a packaged template asset against the master profile or an agent pool.
        examples:
        - name: Render the vnet fragment.
          text: >
            az aks-engine template render -f apimodel.json -n kubernetesvnet.t
        - name: Render the first agent pool resources escaped for embedding in a json string.
          text: >
            az aks-engine template render -f apimodel.json -n kubernetesagentresources.t
            --profile-index 0 --single-line
    """

    helps[
        "aks-engine template kubeconfig"
    ] = """
        type: command
        short-summary: Generate the admin kubeconfig document for a cluster.
        examples:
        - name: Generate the kubeconfig of a cluster in westus2.
          text: >
            az aks-engine template kubeconfig -f apimodel.json -l westus2
    """

    helps[
        "aks-engine template extensions"
    ] = """
        type: command
        short-summary: Resolve the linked template deployments of every opted in extension.
        long-summary: |
            Each extension is validated against its supported-orchestrators.json before
            template-link.json is fetched. Any failure aborts the whole resolution.
        examples:
        - name: Resolve extensions without a progress indicator.
          text: >
            az aks-engine template extensions -f apimodel.json --no-progress
    """

    helps[
        "aks-engine template custom-script"
    ] = """
        type: command
        short-summary: Gzip and base64 encode a bootstrap script for inline embedding.
        examples:
        - name: Package a provisioning script.
          text: >
            az aks-engine template custom-script --file ./provision.sh
    """
