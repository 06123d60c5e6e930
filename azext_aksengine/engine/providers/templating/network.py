# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
network: vnet, load balancer, security rule and disk fragments derived from pool profiles.

All functions return json fragment text meant to be spliced into a larger template.
"""

from typing import List

from .common import BASE_LB_PRIORITY, DEFAULT_POD_CIDR_FORMAT, StorageProfile
from .models import AgentPoolProfile, ClusterProperties

MASTER_SUBNET = """{
            "name": "[variables('masterSubnetName')]",
            "properties": {
              "addressPrefix": "[variables('masterSubnet')]"
            }
          }"""

AGENT_SUBNET = """          {{
            "name": "[variables('{name}SubnetName')]",
            "properties": {{
              "addressPrefix": "[variables('{name}Subnet')]"
            }}
          }}"""

AGENT_SUBNET_NSG = """          {{
            "name": "[variables('{name}SubnetName')]",
            "properties": {{
              "addressPrefix": "[variables('{name}Subnet')]",
              "networkSecurityGroup": {{
                "id": "[resourceId('Microsoft.Network/networkSecurityGroups', variables('{name}NSGName'))]"
              }}
            }}
          }}"""

AGENT_NSG_DEPENDENCY = """        "[concat('Microsoft.Network/networkSecurityGroups/', variables('{name}NSGName'))]\""""

LB_RULE = """	          {{
            "name": "LBRule{port}",
            "properties": {{
              "backendAddressPool": {{
                "id": "[concat(variables('{name}LbID'), '/backendAddressPools/', variables('{name}LbBackendPoolName'))]"
              }},
              "backendPort": {port},
              "enableFloatingIP": false,
              "frontendIPConfiguration": {{
                "id": "[variables('{name}LbIPConfigID')]"
              }},
              "frontendPort": {port},
              "idleTimeoutInMinutes": 5,
              "loadDistribution": "Default",
              "probe": {{
                "id": "[concat(variables('{name}LbID'),'/probes/tcp{port}Probe')]"
              }},
              "protocol": "tcp"
            }}
          }}"""

PROBE = """          {{
            "name": "tcp{port}Probe",
            "properties": {{
              "intervalInSeconds": "5",
              "numberOfProbes": "2",
              "port": {port},
              "protocol": "tcp"
            }}
          }}"""

SECURITY_RULE = """          {{
            "name": "Allow_{port}",
            "properties": {{
              "access": "Allow",
              "description": "Allow traffic from the Internet to port {port}",
              "destinationAddressPrefix": "*",
              "destinationPortRange": "{port}",
              "direction": "Inbound",
              "priority": {priority},
              "protocol": "*",
              "sourceAddressPrefix": "Internet",
              "sourcePortRange": "*"
            }}
          }}"""

STORAGE_ACCOUNT_INDEX = (
    "add(add(div(copyIndex(),variables('maxVMsPerStorageAccount')),variables('{name}StorageAccountOffset')),"
    "variables('dataStorageAccountPrefixSeed'))"
)

DATA_DISK = (
    """            {{
              "createOption": "Empty",
              "diskSizeGB": "{size}",
              "lun": {lun},
              "name": "[concat(variables('{name}VMNamePrefix'), copyIndex(),'-datadisk{lun}')]",
              "vhd": {{
                "uri": "[concat('http://',variables('storageAccountPrefixes')[mod({index},"""
    """variables('storageAccountPrefixesCount'))],variables('storageAccountPrefixes')[div({index},"""
    """variables('storageAccountPrefixesCount'))],variables('{name}DataAccountName'),"""
    """'.blob.core.windows.net/vhds/',variables('{name}VMNamePrefix'),copyIndex(), '--datadisk{lun}.vhd')]"
              }}
            }}"""
)

MANAGED_DATA_DISK = """            {{
              "diskSizeGB": "{size}",
              "lun": {lun},
              "createOption": "Empty"
            }}"""

POD_SUBNET = """{{
            "name": "podCIDR{index}",
            "properties": {{
              "addressPrefix": "{prefix}",
              "networkSecurityGroup": {{
                "id": "[variables('nsgID')]"
              }},
              "routeTable": {{
                "id": "[variables('routeTableID')]"
              }}
            }}
          }}"""


def get_vnet_address_prefixes(properties: ClusterProperties) -> str:
    visited_subnets = {properties.master_profile.subnet}
    prefixes = ["\"[variables('masterSubnet')]\""]
    for profile in properties.agent_pool_profiles:
        if profile.subnet not in visited_subnets:
            visited_subnets.add(profile.subnet)
            prefixes.append(f"\"[variables('{profile.name}Subnet')]\"")
    return ",\n            ".join(prefixes)


def get_vnet_subnet_dependencies(properties: ClusterProperties) -> str:
    return ",\n".join(AGENT_NSG_DEPENDENCY.format(name=p.name) for p in properties.agent_pool_profiles)


def get_vnet_subnets(properties: ClusterProperties, add_nsg: bool) -> str:
    agent_format = AGENT_SUBNET_NSG if add_nsg else AGENT_SUBNET
    subnets = [MASTER_SUBNET]
    subnets.extend(agent_format.format(name=p.name) for p in properties.agent_pool_profiles)
    return ",\n".join(subnets)


def get_lb_rule(name: str, port: int) -> str:
    return LB_RULE.format(name=name, port=port)


def get_lb_rules(name: str, ports: List[int]) -> str:
    return ",\n".join(get_lb_rule(name, port) for port in ports)


def get_probe(port: int) -> str:
    return PROBE.format(port=port)


def get_probes(ports: List[int]) -> str:
    return ",\n".join(get_probe(port) for port in ports)


def get_security_rule(port: int, port_index: int) -> str:
    return SECURITY_RULE.format(port=port, priority=BASE_LB_PRIORITY + port_index)


def get_security_rules(ports: List[int]) -> str:
    return ",\n".join(get_security_rule(port, index) for index, port in enumerate(ports))


def get_data_disks(profile: AgentPoolProfile) -> str:
    if not profile.has_disks:
        return ""

    disks = []
    for lun, size in enumerate(profile.disk_sizes_gb):
        if profile.storage_profile == StorageProfile.storage_account.value:
            disks.append(
                DATA_DISK.format(
                    size=size,
                    lun=lun,
                    name=profile.name,
                    index=STORAGE_ACCOUNT_INDEX.format(name=profile.name),
                )
            )
        elif profile.storage_profile == StorageProfile.managed_disks.value:
            disks.append(MANAGED_DATA_DISK.format(size=size, lun=lun))
    return '"dataDisks": [\n' + ",\n".join(disks) + "\n          ],"


def get_kubernetes_pod_start_index(properties: ClusterProperties) -> int:
    node_count = properties.master_profile.count
    for profile in properties.agent_pool_profiles:
        if not profile.is_windows:
            node_count += profile.count
    return node_count + 1


def get_kubernetes_subnets(properties: ClusterProperties) -> str:
    """
    One pod subnet per Windows agent vm. The cidr counter starts past every non-Windows
    node so pod ranges never overlap the node ip space.
    """
    result = []
    cidr_index = get_kubernetes_pod_start_index(properties)
    for profile in properties.agent_pool_profiles:
        if not profile.is_windows:
            continue
        for _ in range(profile.count):
            result.append(",\n")
            result.append(POD_SUBNET.format(index=cidr_index, prefix=DEFAULT_POD_CIDR_FORMAT.format(cidr_index)))
            cidr_index += 1
    return "".join(result)
