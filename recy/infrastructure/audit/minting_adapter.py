"""
Adapter: NFT minting service client.

Implements MintingPort over HTTP. The minting service (Web3 gateway) is
an opaque collaborator: one POST per request, no retries. Any transport
error, timeout or non-2xx answer is raised as MintingServiceError.
"""

import logging
from typing import Optional

import httpx

from recy.domain.audit.entities import MintReceipt, MintRequest
from recy.domain.audit.errors import MintingServiceError
from recy.domain.audit.ports import MintingPort

logger = logging.getLogger(__name__)


class Web3MintingAdapter(MintingPort):
    """HTTP client for the minting service.

    Args:
        base_url: Service root, e.g. "http://web3:4000".
        timeout: Request timeout in seconds.
        client: Optional preconfigured client (tests inject a MockTransport).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def mint(self, request: MintRequest) -> MintReceipt:
        payload = {
            "auditId": request.audit_id,
            "walletAddress": request.wallet_address,
        }
        if request.metadata_uri:
            payload["metadataUri"] = request.metadata_uri

        try:
            response = self._client.post("/mint", json=payload)
            response.raise_for_status()
            body = response.json()
            receipt = MintReceipt(
                transaction_hash=str(body["transactionHash"]),
                token_id=str(body["tokenId"]) if body.get("tokenId") is not None else None,
            )
        except httpx.HTTPStatusError as exc:
            raise MintingServiceError(f"status {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise MintingServiceError(type(exc).__name__) from exc
        except (KeyError, ValueError) as exc:
            raise MintingServiceError("malformed response") from exc

        logger.info("NFT minted for audit=%s tx=%s", request.audit_id, receipt.transaction_hash)
        return receipt

    def close(self) -> None:
        self._client.close()
