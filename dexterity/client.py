"""Async read-only contract client for the Stacks API.

Only `call-read` is implemented; retries and key rotation are left to the
HTTP layer in front of the API.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from dexterity.constants import DEFAULT_API_URL
from dexterity.errors import NetworkError

logger = structlog.get_logger()

CALL_READ_PATH = "/v2/contracts/call-read/{address}/{name}/{function}"


def split_contract_id(contract_id: str) -> tuple[str, str]:
    """Split `<address>.<name>` into its parts."""
    address, sep, name = contract_id.partition(".")
    if not sep or not address or not name:
        raise ValueError(f"Invalid contract id: {contract_id}")
    return address, name


class StacksClient:
    """Thin wrapper over httpx for read-only contract calls.

    Usage:
        async with StacksClient(api_key="...") as client:
            result_hex = await client.call_read_only(vault_id, "quote", [amount, opcode])
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        api_key: str | None = None,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        headers = {"x-hiro-api-key": api_key} if api_key else {}
        self._client = http_client or httpx.AsyncClient(
            base_url=api_url, headers=headers, timeout=timeout
        )

    async def __aenter__(self) -> StacksClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def call_read_only(
        self,
        contract_id: str,
        function_name: str,
        arguments: list[str],
        sender: str | None = None,
    ) -> str:
        """Call a read-only contract function.

        Args:
            contract_id: `<address>.<name>` of the contract
            function_name: Clarity function name
            arguments: Hex-serialized Clarity arguments
            sender: Sender principal (defaults to the contract address)

        Returns:
            Hex-serialized Clarity result

        Raises:
            NetworkError: On transport errors, HTTP errors or a non-okay result
        """
        address, name = split_contract_id(contract_id)
        path = CALL_READ_PATH.format(address=address, name=name, function=function_name)
        try:
            response = await self._client.post(
                path, json={"sender": sender or address, "arguments": arguments}
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "call_read_failed",
                contract=contract_id,
                function=function_name,
                error=str(e),
            )
            raise NetworkError(f"call-read {contract_id}::{function_name} failed: {e}") from e

        if not payload.get("okay"):
            raise NetworkError(
                f"call-read {contract_id}::{function_name} rejected: {payload.get('cause')}"
            )
        return str(payload["result"])


__all__ = ["StacksClient", "split_contract_id"]
