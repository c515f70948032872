"""ABI encoding helpers for contract creation and calls."""

from typing import Any, Dict, List, Sequence

from eth_abi import encode
from web3 import Web3


def _input_types(entry: Dict[str, Any]) -> List[str]:
    return [item["type"] for item in entry.get("inputs", [])]


def encode_constructor_args(abi: List[Dict[str, Any]], args: Sequence[Any]) -> str:
    """
    ABI-encode constructor arguments.

    Args:
        abi: Contract ABI
        args: Positional constructor arguments

    Returns:
        Hex string without 0x prefix; empty string for an argument-less constructor

    Raises:
        ValueError: If the number of arguments does not match the constructor
    """
    constructor = next((item for item in abi if item.get("type") == "constructor"), None)
    types = _input_types(constructor) if constructor else []

    if len(types) != len(args):
        raise ValueError(
            f"Constructor expects {len(types)} argument(s), got {len(args)}"
        )
    if not types:
        return ""

    return encode(types, list(args)).hex()


def function_selector(name: str, types: Sequence[str]) -> bytes:
    signature = f"{name}({','.join(types)})"
    return bytes(Web3.keccak(text=signature)[:4])


def encode_function_call(
    abi: List[Dict[str, Any]], function_name: str, args: Sequence[Any]
) -> str:
    """
    ABI-encode a call to a contract function.

    Overloads are resolved by argument count.

    Returns:
        0x-prefixed calldata

    Raises:
        ValueError: If no function with that name and arity exists in the ABI
    """
    for item in abi:
        if (
            item.get("type") == "function"
            and item.get("name") == function_name
            and len(item.get("inputs", [])) == len(args)
        ):
            types = _input_types(item)
            calldata = function_selector(function_name, types) + encode(types, list(args))
            return "0x" + calldata.hex()

    raise ValueError(
        f"Function '{function_name}' with {len(args)} argument(s) not found in ABI"
    )
