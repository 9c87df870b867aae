from typing import Dict, List, Literal, TypedDict, Union

AddressType = Literal["canonical", "eip155", "zksync"]

ADDRESS_TYPES = ("canonical", "eip155", "zksync")

NetworkAddressesJSON = Dict[str, Union[str, List[str]]]

class SingletonDeploymentJSON(TypedDict, total=False):
    version: str
    contractName: str
    released: bool
    deployments: Dict[str, dict]
    networkAddresses: NetworkAddressesJSON
    abi: List[dict]

class Options(TypedDict):
    version: str
    chain_id: str
    deployment_type: AddressType
    verbose: bool
